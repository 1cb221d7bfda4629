import pytest

from app.exceptions import ValidationFailed
from app.services.csv_import import count_words, detect_columns, parse_csv, parse_score


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("41.5", 41.5),
        (" 7 ", 7.0),
        ("0", 0.0),
        ("", None),
        (None, None),
        ("n/a", None),
        ("12abc", None),
        ("nan", None),
        ("inf", None),
    ],
)
def test_parse_score(raw, expected):
    assert parse_score(raw) == expected


def test_count_words_splits_on_any_whitespace():
    assert count_words("one  two\tthree\nfour") == 4
    assert count_words("") == 0


def test_detect_columns_is_case_insensitive():
    assert detect_columns(["Filename", "TRANSCRIPTION", "BLEU"]) == {"audio": True, "transcription": True}
    assert detect_columns(["audio_name", "text"]) == {"audio": True, "transcription": False}
    assert detect_columns([]) == {"audio": False, "transcription": False}


def test_parse_csv_with_quotes_and_blank_lines():
    content = b'audio,transcription\r\n"a.wav","hello, world"\r\n\r\n,\r\nb.wav,"multi\nline"\r\n'

    columns, rows = parse_csv(content)

    assert columns == ["audio", "transcription"]
    assert rows == [
        {"audio": "a.wav", "transcription": "hello, world"},
        {"audio": "b.wav", "transcription": "multi\nline"},
    ]


def test_parse_csv_rejects_non_utf8():
    with pytest.raises(ValidationFailed):
        parse_csv(b"audio,transcription\n\xff\xfe,bad\n")


def test_parse_csv_rejects_malformed_quoting():
    with pytest.raises(ValidationFailed) as excinfo:
        parse_csv(b'audio,transcription\na.wav,"unterminated\n')
    assert excinfo.value.status_code == 400
