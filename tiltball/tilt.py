"""
Tilt source — rotation-rate sensor samples → 2D tilt vector.

The sensor callback is the only writer of TiltState; the frame loop is the
only reader.
"""

import logging
import os
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

import tiltball as P

os.environ['PYGAME_HIDE_SUPPORT_PROMPT'] = '1'
import pygame

logger = logging.getLogger(__name__)

Tilt = Tuple[float, float]


class TiltState:
    """Single-writer / single-reader handoff of the latest tilt vector."""

    def __init__(self, initial: Tilt = (0.0, 0.0)):
        self._lock = threading.Lock()
        self._value: Tilt = (float(initial[0]), float(initial[1]))

    def set(self, tilt):
        value = (float(tilt[0]), float(tilt[1]))
        with self._lock:
            self._value = value

    def get(self) -> Tilt:
        with self._lock:
            return self._value


@dataclass(frozen=True)
class Sensor:
    name: str


@dataclass
class SensorEvent:
    values: Sequence[float]
    sensor: Optional[Sensor] = None


def map_rotation_rate(values: Sequence[float]) -> Tilt:
    """Axis 1 (negated) drives x, axis 0 drives y. Missing axes read as 0."""
    ry = values[1] if len(values) > 1 else 0.0
    rx = values[0] if len(values) > 0 else 0.0
    return (-float(ry), float(rx))


class NullSensorManager:
    """A device without a gyroscope."""

    def default_gyroscope(self) -> Optional[Sensor]:
        return None

    def register_listener(self, listener, sensor: Sensor):
        raise RuntimeError("no sensors to register against")

    def unregister_listener(self, listener):
        pass


class KeyboardGyroscope:
    """
    Desktop stand-in for a gyroscope. Arrow keys / WASD held down become
    rotation-rate samples delivered to registered listeners on poll().
    """

    def __init__(self, rate: float = P.KEY_RATE):
        self.rate = rate
        self.sensor = Sensor('keyboard-gyroscope')
        self.listeners: List = []

    def default_gyroscope(self) -> Optional[Sensor]:
        return self.sensor

    def register_listener(self, listener, sensor: Sensor):
        if listener not in self.listeners:
            self.listeners.append(listener)

    def unregister_listener(self, listener):
        if listener in self.listeners:
            self.listeners.remove(listener)

    def sample(self, keys) -> Tuple[float, float, float]:
        left = keys[pygame.K_LEFT] or keys[pygame.K_a]
        right = keys[pygame.K_RIGHT] or keys[pygame.K_d]
        up = keys[pygame.K_UP] or keys[pygame.K_w]
        down = keys[pygame.K_DOWN] or keys[pygame.K_s]
        # Rolling left means a positive rate on axis 1 (it is negated on use)
        ry = self.rate * (bool(left) - bool(right))
        rx = self.rate * (bool(down) - bool(up))
        return (rx, ry, 0.0)

    def poll(self, keys):
        event = SensorEvent(values=self.sample(keys), sensor=self.sensor)
        for listener in list(self.listeners):
            listener.on_sensor_changed(event)


class GyroTiltSensor:
    """Listens to the default gyroscope and forwards tilt vectors."""

    def __init__(self, manager, on_tilt: Callable[[Tilt], None]):
        self.manager = manager
        self.on_tilt = on_tilt
        self.sensor: Optional[Sensor] = manager.default_gyroscope()

    def start(self):
        if self.sensor is None:
            logger.warning("no gyroscope available, tilt stays at zero")
            return
        self.manager.register_listener(self, self.sensor)
        logger.debug("subscribed to %s", self.sensor.name)

    def stop(self):
        self.manager.unregister_listener(self)
        logger.debug("sensor subscription released")

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False

    def on_sensor_changed(self, event: Optional[SensorEvent]):
        if event is None:
            return
        self.on_tilt(map_rotation_rate(event.values))

    def on_accuracy_changed(self, sensor: Optional[Sensor], accuracy: int):
        pass
