import os

os.environ.setdefault('SDL_VIDEODRIVER', 'dummy')
os.environ.setdefault('SDL_AUDIODRIVER', 'dummy')
os.environ['PYGAME_HIDE_SUPPORT_PROMPT'] = '1'

import pytest

from tiltball.engine import ArenaConfig, TiltBallEngine


@pytest.fixture
def engine():
    config = ArenaConfig()
    return TiltBallEngine(config, bounds=(config.width, config.height))
