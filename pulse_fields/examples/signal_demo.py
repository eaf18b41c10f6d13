"""Signal propagation demo.

Generates a seeded demo graph, injects one impulse into the first node and
shows how it spreads along the delay-line edges over 40 ticks.
"""

from __future__ import annotations

import numpy as np
import matplotlib.pyplot as plt

from ..core.context import SimMode
from ..simulation.session import Session
from ..simulation.engine import inject_impulse
from ..visualization.renderer import SnapshotRenderer


def main(output: str | None = "signal_demo.png", show: bool = True, seed: int = 3) -> Session:
    session = Session(rng=np.random.default_rng(seed))
    session.regenerate()
    session.set_mode(SimMode.SIGNAL)

    first = next(iter(session.graph))
    inject_impulse(session.ctx, first)

    renderer = SnapshotRenderer(session.config)
    fig, axes = plt.subplots(1, 3, figsize=(18, 5))
    done = 0
    # Show ticks 0, 8 and 40
    for ax, tick in zip(axes, [0, 8, 40]):
        session.engine.run(tick - done)
        done = tick
        renderer.draw(session.snapshot(), ax, title=f"Signal — tick {tick}")
    plt.tight_layout()
    if output:
        plt.savefig(output, dpi=120)
    if show:
        plt.show()
    plt.close(fig)
    return session


if __name__ == "__main__":
    main()
