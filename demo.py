"""
Tilt Ball — roll the ball around the neon walls.
Run: venv/bin/python demo.py
Arrow keys / WASD tilt the virtual gyroscope. Press Q or close window to exit.

Headless: venv/bin/python demo.py --headless 600 --tilt 1 0.5
"""
import argparse
import logging

from tiltball.engine import ArenaConfig, TiltBallEngine, generate_trajectory
from tiltball.metrics import compute_energy, min_clearance
from tiltball.renderer import AppearanceConfig, Renderer
from tiltball.tilt import KeyboardGyroscope
import tiltball as P


def main(argv=None):
    p = argparse.ArgumentParser(description="Tilt Ball")
    p.add_argument("--width", type=float, default=P.ARENA_WIDTH, help="Arena width in pixels")
    p.add_argument("--height", type=float, default=P.ARENA_HEIGHT, help="Arena height in pixels")
    p.add_argument("--fps", type=int, default=P.FPS)
    p.add_argument("--key-rate", type=float, default=P.KEY_RATE, help="Virtual gyroscope rate per held key")
    p.add_argument("--headless", type=int, default=None, metavar="N", help="Simulate N frames without a window")
    p.add_argument("--tilt", type=float, nargs=2, default=(0.0, 0.0), metavar=("TX", "TY"),
                   help="Constant tilt for --headless")
    p.add_argument("-v", "--verbose", action="store_true")
    args = p.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    config = ArenaConfig(width=args.width, height=args.height)

    if args.headless is not None:
        traj = generate_trajectory(config, n_steps=args.headless, tilt=args.tilt)
        states = traj['states']
        print(f"Collisions: {len(traj['collisions'])}")
        print(f"Final position: ({states[-1, 0]:.2f}, {states[-1, 1]:.2f})")
        print(f"Final energy: {compute_energy(states)[-1]:.4f}")
        print(f"Min clearance: {min_clearance(states, traj['radius'], traj['bounds']):.4f}")
        return 0

    engine = TiltBallEngine(config)
    renderer = Renderer(AppearanceConfig(fps=args.fps))
    renderer.play(engine, KeyboardGyroscope(rate=args.key_rate))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
