import logging
import threading
from collections import defaultdict

import pygame
import pytest

from tiltball.engine import TiltBallEngine
from tiltball.tilt import (GyroTiltSensor, KeyboardGyroscope,
                           NullSensorManager, SensorEvent, TiltState,
                           map_rotation_rate)


def keys(*pressed):
    state = defaultdict(bool)
    for k in pressed:
        state[k] = True
    return state


def test_rotation_rate_mapping():
    assert map_rotation_rate((0.5, 2.0, 9.8)) == (-2.0, 0.5)


def test_missing_axes_default_to_zero():
    assert map_rotation_rate((0.3,)) == (0.0, 0.3)
    assert map_rotation_rate(()) == (0.0, 0.0)


def test_non_numeric_sample_raises():
    with pytest.raises(ValueError):
        map_rotation_rate(('x', 'y', 'z'))


def test_tilt_state_handoff():
    state = TiltState()
    assert state.get() == (0.0, 0.0)
    state.set([1, -2])
    assert state.get() == (1.0, -2.0)


def test_tilt_state_reads_whole_pairs():
    state = TiltState()
    torn = []

    def writer():
        for i in range(20000):
            state.set((i, i))

    t = threading.Thread(target=writer)
    t.start()
    while t.is_alive():
        x, y = state.get()
        if x != y:
            torn.append((x, y))
    t.join()
    assert torn == []
    assert state.get() == (19999.0, 19999.0)


def test_sensor_forwards_tilt():
    received = []
    sensor = GyroTiltSensor(KeyboardGyroscope(), received.append)
    sensor.on_sensor_changed(SensorEvent(values=(0.25, -1.0, 0.0)))
    assert received == [(1.0, 0.25)]


def test_sensor_ignores_missing_event():
    received = []
    sensor = GyroTiltSensor(KeyboardGyroscope(), received.append)
    sensor.on_sensor_changed(None)
    sensor.on_accuracy_changed(None, 3)
    assert received == []


def test_no_gyroscope_keeps_tilt_at_zero(caplog):
    tilt = TiltState()
    with caplog.at_level(logging.WARNING, logger='tiltball.tilt'):
        with GyroTiltSensor(NullSensorManager(), tilt.set) as sensor:
            assert sensor.sensor is None
    assert tilt.get() == (0.0, 0.0)
    assert "no gyroscope" in caplog.text


def test_subscription_is_scoped():
    gyro = KeyboardGyroscope()
    with GyroTiltSensor(gyro, TiltState().set) as sensor:
        assert gyro.listeners == [sensor]
    assert gyro.listeners == []


def test_subscription_released_on_error():
    gyro = KeyboardGyroscope()
    with pytest.raises(RuntimeError):
        with GyroTiltSensor(gyro, TiltState().set):
            raise RuntimeError("view torn down")
    assert gyro.listeners == []


def test_start_twice_registers_once():
    gyro = KeyboardGyroscope()
    sensor = GyroTiltSensor(gyro, TiltState().set)
    sensor.start()
    sensor.start()
    assert len(gyro.listeners) == 1
    sensor.stop()
    sensor.stop()
    assert gyro.listeners == []


@pytest.mark.parametrize('key, expected', [
    (pygame.K_LEFT, (-2.0, 0.0)),
    (pygame.K_d, (2.0, 0.0)),
    (pygame.K_UP, (0.0, -2.0)),
    (pygame.K_s, (0.0, 2.0)),
])
def test_keyboard_gyroscope_directions(key, expected):
    engine = TiltBallEngine(bounds=(720, 960))
    gyro = KeyboardGyroscope(rate=2.0)
    with GyroTiltSensor(gyro, engine.tilt.set):
        gyro.poll(keys(key))
    assert engine.tilt.get() == expected


def test_keyboard_gyroscope_release_zeroes_tilt():
    tilt = TiltState()
    gyro = KeyboardGyroscope()
    with GyroTiltSensor(gyro, tilt.set):
        gyro.poll(keys(pygame.K_RIGHT, pygame.K_DOWN))
        assert tilt.get() != (0.0, 0.0)
        gyro.poll(keys())
        assert tilt.get() == (0.0, 0.0)


def test_poll_without_listeners_is_silent():
    tilt = TiltState()
    gyro = KeyboardGyroscope()
    gyro.poll(keys(pygame.K_LEFT))
    assert tilt.get() == (0.0, 0.0)


def test_keyboard_tilt_moves_ball_left():
    engine = TiltBallEngine(bounds=(720, 960))
    gyro = KeyboardGyroscope()
    with GyroTiltSensor(gyro, engine.tilt.set):
        for _ in range(5):
            gyro.poll(keys(pygame.K_a))
            engine.step(0.016)
    assert engine.ball.x < 220.0
    assert engine.ball.y == 220.0
