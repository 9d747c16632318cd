import random

from partyhost.services.games.words import DEFAULT_WORDS, Vocabulary


def test_duplicates_and_blanks_are_dropped():
    vocabulary = Vocabulary(['Apple', 'apple', ' ', 'kite ', 'KITE', 'moon'])
    assert vocabulary.words == ['Apple', 'kite', 'moon']
    assert len(vocabulary) == 3


def test_pick_returns_distinct_words():
    vocabulary = Vocabulary(DEFAULT_WORDS, rng=random.Random(1))
    for _ in range(20):
        picked = vocabulary.pick(3)
        assert len(set(picked)) == 3
        assert set(picked) <= set(DEFAULT_WORDS)


def test_pick_caps_at_list_size():
    vocabulary = Vocabulary(['a', 'b'])
    assert sorted(vocabulary.pick(5)) == ['a', 'b']


def test_from_file(tmp_path):
    path = tmp_path / 'words.txt'
    path.write_text('rocket\n\nplanet\nRocket\n', encoding='utf-8')
    vocabulary = Vocabulary.from_file(str(path))
    assert vocabulary.words == ['rocket', 'planet']


def test_from_config_defaults_to_builtin_list():
    assert len(Vocabulary.from_config({'WORDS_FILE': None})) == len(set(DEFAULT_WORDS))


def test_words_command(flask_app):
    runner = flask_app.test_cli_runner()
    result = runner.invoke(args=['words', '--sample', '2'])
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[0] == f"{len(DEFAULT_WORDS)} words loaded"
    assert len(lines) == 3
