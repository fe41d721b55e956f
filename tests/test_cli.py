from gridsnake.cli import parse_args


def test_defaults(monkeypatch):
    monkeypatch.delenv("GRIDSNAKE_DATA", raising=False)
    args = parse_args([])
    assert args.difficulty is None
    assert args.obstacles is None
    assert args.mute is False
    assert args.loglevel == "WARNING"
    assert args.data_dir.endswith(".gridsnake")


def test_overrides():
    args = parse_args(["--difficulty", "hard", "--obstacles", "on", "--mute",
                       "--data-dir", "/tmp/snake", "-l", "DEBUG"])
    assert (args.difficulty, args.obstacles, args.mute) == ("hard", "on", True)
    assert args.data_dir == "/tmp/snake"
    assert args.loglevel == "DEBUG"
