"""Desktop entry point: the interactive graph editor."""

import logging

from pulse_fields.visualization.interactive import main

if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    main()
