from consulseeds.normalize import deduplicate, host_from_key, split_list, tags_allowed


def test_split_list_trims_and_drops_empty():
    assert split_list(" a, b ,,c , ") == ["a", "b", "c"]


def test_split_list_none_and_blank():
    assert split_list(None) == []
    assert split_list("") == []
    assert split_list(" , ,") == []


def test_deduplicate_keeps_first_occurrence_and_case():
    assert deduplicate(["b", "A", "b", "a", "A"]) == ["b", "A", "a"]


def test_host_from_key_takes_last_segment():
    assert host_from_key("cassandra/seeds/10.0.0.1") == "10.0.0.1"
    assert host_from_key("10.0.0.1") == "10.0.0.1"


def test_host_from_key_ignores_trailing_slash():
    assert host_from_key("cassandra/seeds/node-1/") == "node-1"


def test_tags_allowed_with_no_required_tags():
    assert tags_allowed(["anything"], [])
    assert tags_allowed([], ())


def test_tags_allowed_is_service_subset_of_required():
    required = {"a", "b"}
    assert tags_allowed(["a"], required)
    assert tags_allowed(["a", "b"], required)
    assert tags_allowed([], required)
    assert not tags_allowed(["a", "c"], required)
    assert not tags_allowed(["c"], required)
