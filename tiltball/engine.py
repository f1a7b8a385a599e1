"""
Tilt-ball physics engine — one ball, a bounded arena, static rectangles.

- Velocity integrates tilt as acceleration, then damps every frame
- Position advances by velocity (pixels per frame)
- Arena edges clamp and bounce; obstacle hits revert to the previous position
- State per ball: (x, y, vx, vy)
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

import tiltball as P
from tiltball.tilt import TiltState

logger = logging.getLogger(__name__)

Vec = Tuple[float, float]


@dataclass
class Ball:
    """Physics-only state container. No appearance variables."""
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    radius: float = P.BALL_RADIUS

    @property
    def position(self) -> np.ndarray:
        return np.array([self.x, self.y])

    @position.setter
    def position(self, p):
        self.x, self.y = float(p[0]), float(p[1])

    @property
    def velocity(self) -> np.ndarray:
        return np.array([self.vx, self.vy])

    @velocity.setter
    def velocity(self, v):
        self.vx, self.vy = float(v[0]), float(v[1])

    @property
    def speed(self) -> float:
        return float(np.hypot(self.vx, self.vy))

    @property
    def state(self) -> np.ndarray:
        return np.array([self.x, self.y, self.vx, self.vy])


@dataclass(frozen=True)
class Obstacle:
    """Static axis-aligned rectangle, immutable for the session."""
    left: float
    top: float
    width: float
    height: float

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Obstacle size must be non-negative, got "
                             f"{self.width}x{self.height}")

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height


@dataclass
class ArenaConfig:
    width: float = P.ARENA_WIDTH
    height: float = P.ARENA_HEIGHT
    start: Vec = P.BALL_START
    radius: float = P.BALL_RADIUS
    obstacles: Sequence[Tuple[float, float, float, float]] = field(
        default_factory=lambda: list(P.OBSTACLES))
    tilt_gain: float = P.TILT_GAIN
    damping: float = P.DAMPING
    edge_perpendicular: float = P.EDGE_PERPENDICULAR
    edge_parallel: float = P.EDGE_PARALLEL
    obstacle_bounce: float = P.OBSTACLE_BOUNCE
    default_dt: float = P.DEFAULT_DT
    max_dt: float = P.MAX_DT

    def __post_init__(self):
        if self.radius <= 0:
            raise ValueError(f"Ball radius must be positive, got {self.radius}")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Arena size must be positive, got "
                             f"{self.width}x{self.height}")

    def build_obstacles(self) -> List[Obstacle]:
        return [o if isinstance(o, Obstacle) else Obstacle(*o)
                for o in self.obstacles]


def circle_hits_rect(center: Vec, radius: float, rect: Obstacle) -> bool:
    """Closest-point test: touching counts as a hit."""
    closest_x = min(max(center[0], rect.left), rect.right)
    closest_y = min(max(center[1], rect.top), rect.bottom)
    dx = center[0] - closest_x
    dy = center[1] - closest_y
    return dx * dx + dy * dy <= radius * radius


def _resolve(candidate_pos: Vec, previous_pos: Vec, candidate_vel: Vec,
             radius: float, bounds: Vec, obstacles: Sequence[Obstacle],
             perpendicular: float = P.EDGE_PERPENDICULAR,
             parallel: float = P.EDGE_PARALLEL,
             bounce: float = P.OBSTACLE_BOUNCE
             ) -> Tuple[Vec, Vec, List[Tuple[str, object]]]:
    x, y = candidate_pos
    vx, vy = candidate_vel
    width, height = bounds
    hits = []

    if x - radius < 0:
        x = radius
        vx, vy = -vx * perpendicular, vy * parallel
        hits.append(('edge', 'left'))
    if y - radius < 0:
        y = radius
        vx, vy = vx * parallel, -vy * perpendicular
        hits.append(('edge', 'top'))
    if x + radius > width:
        x = width - radius
        vx, vy = -vx * perpendicular, vy * parallel
        hits.append(('edge', 'right'))
    if y + radius > height:
        y = height - radius
        vx, vy = vx * parallel, -vy * perpendicular
        hits.append(('edge', 'bottom'))

    # Sequential: later obstacles see the already reverted position
    for i, rect in enumerate(obstacles):
        if circle_hits_rect((x, y), radius, rect):
            x, y = previous_pos
            vx, vy = -vx * bounce, -vy * bounce
            hits.append(('obstacle', i))

    return (x, y), (vx, vy), hits


def resolve_collisions(candidate_pos: Vec, previous_pos: Vec,
                       candidate_vel: Vec, radius: float, bounds: Vec,
                       obstacles: Sequence[Obstacle],
                       perpendicular: float = P.EDGE_PERPENDICULAR,
                       parallel: float = P.EDGE_PARALLEL,
                       bounce: float = P.OBSTACLE_BOUNCE) -> Tuple[Vec, Vec]:
    """
    (candidate_pos, previous_pos, candidate_vel, radius, bounds, obstacles)
    → (final_pos, final_vel)

    Edges clamp the crossed coordinate; an obstacle hit reverts the whole
    position to previous_pos. `perpendicular` and `parallel` scale the velocity
    components across and along a crossed edge; `bounce` scales both on an
    obstacle hit.
    """
    pos, vel, _ = _resolve(candidate_pos, previous_pos, candidate_vel,
                           radius, bounds, obstacles,
                           perpendicular, parallel, bounce)
    return pos, vel


class FrameClock:
    """Turns display frame timestamps (ns) into clamped dt seconds."""

    def __init__(self, default_dt: float = P.DEFAULT_DT,
                 max_dt: float = P.MAX_DT):
        self.default_dt = default_dt
        self.max_dt = max_dt
        self.last_nanos = 0

    def advance(self, frame_nanos: int) -> float:
        if self.last_nanos == 0:
            dt = self.default_dt
        else:
            dt = min((frame_nanos - self.last_nanos) / 1e9, self.max_dt)
        self.last_nanos = frame_nanos
        return dt

    def reset(self):
        self.last_nanos = 0


class TiltBallEngine:
    """
    Per-frame tilt-ball simulation.

    Step: tilt → velocity → damping → candidate position → edges → obstacles
    """

    def __init__(self, config: Optional[ArenaConfig] = None,
                 tilt: Optional[TiltState] = None,
                 bounds: Optional[Vec] = None):
        self.config = config or ArenaConfig()
        self.tilt = tilt if tilt is not None else TiltState()
        self.obstacles: List[Obstacle] = self.config.build_obstacles()
        self.clock = FrameClock(self.config.default_dt, self.config.max_dt)
        self.bounds: Optional[Vec] = None
        self.ball = Ball(0.0, 0.0, radius=self.config.radius)
        self.time: float = 0.0
        self.frame: int = 0
        self.collision_log: List[Dict] = []
        self.reset()
        if bounds is not None:
            self.resize(*bounds)

    def reset(self) -> Ball:
        x, y = self.config.start
        self.ball = Ball(float(x), float(y), radius=self.config.radius)
        self.time = 0.0
        self.frame = 0
        self.collision_log = []
        self.clock.reset()
        return self.ball

    def resize(self, width: float, height: float):
        """
        New arena bounds; the ball keeps its position and velocity.
        An empty surface means not measured yet, so ticks become no-ops.
        """
        if width <= 0 or height <= 0:
            self.bounds = None
        else:
            self.bounds = (float(width), float(height))
        # The frame loop restarts on a new surface size
        self.clock.reset()
        logger.debug("arena resized to %sx%s", width, height)

    def tick(self, frame_nanos: int) -> Ball:
        """Display frame callback. No-op until the arena is measured."""
        dt = self.clock.advance(frame_nanos)
        if self.bounds is None:
            return self.ball
        return self._advance(dt)

    def step(self, dt: float = P.DEFAULT_DT) -> Ball:
        if self.bounds is None:
            return self.ball
        return self._advance(min(dt, self.config.max_dt))

    def _advance(self, dt: float) -> Ball:
        b = self.ball
        tx, ty = self.tilt.get()
        gain = self.config.tilt_gain * dt
        vx = (b.vx + tx * gain) * self.config.damping
        vy = (b.vy + ty * gain) * self.config.damping

        pos, vel, hits = _resolve((b.x + vx, b.y + vy), (b.x, b.y), (vx, vy),
                                  b.radius, self.bounds, self.obstacles,
                                  self.config.edge_perpendicular,
                                  self.config.edge_parallel,
                                  self.config.obstacle_bounce)
        b.x, b.y = pos
        b.vx, b.vy = vel

        for kind, which in hits:
            self.collision_log.append({
                'time': self.time, 'frame': self.frame,
                'kind': kind, 'which': which,
            })
        self.time += dt
        self.frame += 1
        return b

    # State access

    def get_state(self) -> np.ndarray:
        """(4,) → [x, y, vx, vy]"""
        return self.ball.state

    def set_state(self, state):
        assert len(state) == 4
        self.ball.x, self.ball.y, self.ball.vx, self.ball.vy = map(float, state)


def generate_trajectory(config: Optional[ArenaConfig] = None,
                        n_steps: int = 200, tilt=(0.0, 0.0),
                        dt: float = P.DEFAULT_DT,
                        bounds: Optional[Vec] = None) -> Dict:
    """
    Headless run. `tilt` is either one (tx, ty) pair held for the whole run
    or an (n_steps, 2) schedule. Returns dict with states, tilts, collisions.
    """
    config = config or ArenaConfig()
    tilts = np.asarray(tilt, dtype=float)
    if tilts.ndim == 1:
        tilts = np.tile(tilts, (n_steps, 1))
    if tilts.shape != (n_steps, 2):
        raise ValueError(f"tilt schedule must be (2,) or ({n_steps}, 2), "
                         f"got {tilts.shape}")

    engine = TiltBallEngine(config, bounds=bounds or (config.width, config.height))
    states = [engine.get_state()]
    for t in range(n_steps):
        engine.tilt.set(tilts[t])
        engine.step(dt)
        states.append(engine.get_state())

    return {
        'states': np.array(states),
        'tilts': tilts,
        'radius': config.radius,
        'bounds': engine.bounds,
        'config': config,
        'collisions': engine.collision_log,
    }
