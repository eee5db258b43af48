from contentkosh_api.core.query import ListOptions, parse_list_options


def test_defaults_are_empty():
    assert parse_list_options() == ListOptions()


def test_page_and_limit_become_skip_and_take():
    options = parse_list_options(page=3, limit=20)
    assert options.skip == 40
    assert options.take == 20


def test_pagination_needs_both_values():
    assert parse_list_options(page=2).take is None
    assert parse_list_options(limit=5).skip is None


def test_sort_field_is_snake_cased():
    options = parse_list_options(sort="createdAt:desc")
    assert options.sort_field == "created_at"
    assert options.sort_desc is True


def test_sort_ascending():
    options = parse_list_options(sort="name:ASC")
    assert options.sort_field == "name"
    assert options.sort_desc is False


def test_malformed_sort_is_ignored():
    for value in ("name", "name:sideways", ":desc"):
        assert parse_list_options(sort=value).sort_field is None
