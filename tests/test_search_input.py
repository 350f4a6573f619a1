from frz.search_input import Key, KeyInput, SearchInput


def char(ch: str, **mods) -> KeyInput:
    return KeyInput(Key.CHAR, ch, **mods)


def test_new_input():
    assert SearchInput("test").text == "test"


def test_newlines_replaced():
    assert SearchInput("test\nwith\rnewlines").text == "test with newlines"


def test_clear():
    field = SearchInput("test")
    field.clear()
    assert field.text == ""


def test_set_text():
    field = SearchInput("initial")
    field.set_text("updated")
    assert field.text == "updated"


def test_input_noop_backspace():
    field = SearchInput()
    assert field.input(KeyInput(Key.BACKSPACE)) is False


def test_input_whitespace_only_change_is_ignored():
    field = SearchInput()
    assert field.input(char(" ")) is False
    assert field.text == " "


def test_input_actual_change_triggers_update():
    field = SearchInput()
    assert field.input(char("a")) is True
    assert field.input(KeyInput(Key.BACKSPACE)) is True
    assert field.text == ""


def test_enter_and_ctrl_m_are_ignored():
    field = SearchInput("abc")
    assert field.input(KeyInput(Key.ENTER)) is False
    assert field.input(char("m", ctrl=True)) is False
    assert field.text == "abc"


def test_cursor_starts_at_beginning():
    field = SearchInput("test")
    assert field.cursor == 0
    assert field.input(char("x")) is True
    assert field.text == "xtest"


def test_movement_does_not_report_change():
    field = SearchInput("abc")
    assert field.input(KeyInput(Key.END)) is False
    assert field.cursor == 3
    assert field.input(char("d")) is True
    assert field.text == "abcd"


def test_delete_removes_character_under_cursor():
    field = SearchInput("abc")
    assert field.input(KeyInput(Key.DELETE)) is True
    assert field.text == "bc"


def test_ctrl_w_deletes_previous_word():
    field = SearchInput("foo bar")
    field.input(KeyInput(Key.END))
    assert field.input(char("w", ctrl=True)) is True
    assert field.text == "foo "


def test_ctrl_k_kills_to_end():
    field = SearchInput("hello world")
    field.input(KeyInput(Key.RIGHT))
    field.input(KeyInput(Key.RIGHT))
    assert field.input(char("k", ctrl=True)) is True
    assert field.text == "he"


def test_tab_inserts_spaces_to_next_stop():
    field = SearchInput("ab")
    field.input(KeyInput(Key.END))
    field.input(KeyInput(Key.TAB))
    assert field.text == "ab  "
    assert field.cursor == 4