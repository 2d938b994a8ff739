from bfmlir.lexer import Token, lex_program


def test_every_command_is_recognised_in_order():
    assert lex_program("><+-,.[]") == [
        Token.SHIFT_RIGHT,
        Token.SHIFT_LEFT,
        Token.INCREMENT,
        Token.DECREMENT,
        Token.INPUT,
        Token.OUTPUT,
        Token.JUMPZ,
        Token.JUMPNZ,
    ]


def test_other_characters_are_ignored():
    assert lex_program("a+b\n- comment") == [Token.INCREMENT, Token.DECREMENT]


def test_empty_program_has_no_tokens():
    assert lex_program("") == []
    assert lex_program("no commands here") == []


def test_token_values_round_trip_filtered_text():
    text = "++[>+hello<-]>.,world"
    expected = "".join(c for c in text if c in "<>+-,.[]")
    assert "".join(t.value for t in lex_program(text)) == expected


def test_token_prints_its_name():
    tokens = lex_program(">]")
    assert [str(t) for t in tokens] == ["shift_right", "jumpnz"]


def test_token_from_character():
    assert Token("[") is Token.JUMPZ