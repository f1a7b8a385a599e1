import pytest

import demo


def test_headless_run_prints_summary(capsys):
    assert demo.main(['--headless', '120', '--tilt', '1', '0.5']) == 0
    out = capsys.readouterr().out
    assert 'Collisions:' in out
    assert 'Final position:' in out
    clearance = float(out.split('Min clearance:')[1].split()[0])
    assert clearance >= 0


def test_headless_without_tilt_stays_put(capsys):
    demo.main(['--headless', '30'])
    out = capsys.readouterr().out
    assert 'Collisions: 0' in out
    assert 'Final position: (220.00, 220.00)' in out


def test_unknown_argument_rejected():
    with pytest.raises(SystemExit):
        demo.main(['--bogus'])
