from battery_trends.utils.logging import Logger


def test_messages_above_verbosity_are_dropped(capsys):
    log = Logger(verbose=1, name="segment")
    log("kept", 1)
    log("dropped", 2)
    out = capsys.readouterr().out

    assert "[segment] kept" in out
    assert "dropped" not in out


def test_write_log_appends_to_file(tmp_path):
    log = Logger(verbose=2, log_dir=tmp_path, write_log=True)
    log("first")
    log.child("resample")("second", 2)
    lines = (tmp_path / "log.txt").read_text(encoding="utf-8").splitlines()

    assert len(lines) == 2
    assert lines[0].endswith("] first")
    assert lines[1].endswith("[resample] second")
