from auditoria.layout import TextToken, group_lines, reconstruct_lines


def tok(text, x, y, page=0):
    return TextToken(text=text, x=x, y=y, page=page)


def test_empty_tokens():
    assert reconstruct_lines([]) == []
    assert group_lines([]) == []


def test_tokens_sorted_left_to_right():
    tokens = [tok("2.069,08", 300, 500), tok("Vencimento", 10, 500), tok("Base", 90, 500)]
    assert reconstruct_lines(tokens) == ["Vencimento Base 2.069,08"]


def test_jitter_merges_into_same_line():
    tokens = [tok("Nome", 10, 700), tok("Matrícula", 200, 697.5), tok("MARIA", 10, 680)]
    assert reconstruct_lines(tokens) == ["Nome Matrícula", "MARIA"]


def test_top_of_page_first():
    tokens = [tok("rodape", 10, 50), tok("cabecalho", 10, 800), tok("meio", 10, 400)]
    assert reconstruct_lines(tokens) == ["cabecalho", "meio", "rodape"]


def test_pages_in_order():
    tokens = [tok("segunda", 10, 800, page=1), tok("primeira", 10, 100, page=0)]
    assert reconstruct_lines(tokens) == ["primeira", "segunda"]


def test_custom_tolerance():
    tokens = [tok("a", 10, 100), tok("b", 20, 92)]
    assert reconstruct_lines(tokens) == ["a", "b"]
    assert reconstruct_lines(tokens, tolerance=10) == ["a b"]
