import pytest

from profile_validator.normalizer import CODE_MAP, CODED, GENERIC, Normalizer, normalize

VOCABULARY = {"invalid", "wrongCount", "duplicate", "tooShort", "tooLong"}


def _codes(tree):
    for key, value in tree.items():
        if isinstance(value, dict):
            yield from _codes(value)
        else:
            yield key


class TestCodedNormalization:
    def test_min_length(self):
        assert normalize({"name": {"minLength": True}}) == {"name": {"tooShort": True}}

    @pytest.mark.parametrize(
        "raw_code, code",
        [
            ("minItems", "wrongCount"),
            ("maxItems", "wrongCount"),
            ("type", "invalid"),
            ("enum", "invalid"),
            ("uniqueItems", "duplicate"),
            ("maxLength", "tooLong"),
        ],
    )
    def test_code_table(self, raw_code, code):
        assert normalize({"field": {raw_code: True}}) == {"field": {code: True}}

    def test_only_vocabulary_remains(self):
        raw = {
            "name": {"minLength": True, "type": True},
            "tags": {"uniqueItems": True, "maxItems": True},
            "address": {"schema": {"city": {"maxLength": True}, "zip": {"enum": True}}},
        }
        assert set(_codes(normalize(raw))) <= VOCABULARY

    def test_unmapped_codes_pass_through(self):
        assert normalize({"name": {"required": True}}) == {"name": {"required": True}}

    def test_nested_bucket_is_flattened(self):
        raw = {"address": {"schema": {"city": {"minLength": True}}}}
        assert normalize(raw) == {"address": {"city": {"tooShort": True}}}

    def test_deeply_nested_buckets(self):
        raw = {"a": {"schema": {"b": {"schema": {"c": {"maxLength": True}}}}}}
        assert normalize(raw) == {"a": {"b": {"c": {"tooLong": True}}}}

    def test_index_only_bucket_marks_field_invalid(self):
        raw = {"tags": {"schema": {"0": {"type": True}, "3": {"minLength": True}}}}
        assert normalize(raw) == {"tags": {"invalid": True}}

    def test_mixed_bucket_is_merged(self):
        raw = {"items": {"schema": {"0": {"type": True}, "extra": {"type": True}}}}
        assert normalize(raw) == {"items": {"0": {"invalid": True}, "extra": {"invalid": True}}}

    def test_bucket_merges_with_existing_codes(self):
        raw = {"address": {"type": True, "schema": {"city": {"minLength": True}}}}
        assert normalize(raw) == {"address": {"invalid": True, "city": {"tooShort": True}}}

    def test_field_named_like_a_code_keeps_children(self):
        raw = {"type": {"schema": {"label": {"minLength": True}}}}
        assert normalize(raw) == {"type": {"label": {"tooShort": True}}}

    def test_root_level_code(self):
        assert normalize({"type": True}) == {"invalid": True}

    def test_root_bucket_is_unwrapped(self):
        raw = {"schema": {"name": {"minLength": True}, "schema": {"type": True}}}
        assert normalize(raw) == {"name": {"tooShort": True}, "schema": {"invalid": True}}

    def test_nested_field_named_schema(self):
        raw = {"schema": {"meta": {"schema": {"schema": {"schema": {"title": {"maxLength": True}}}}}}}
        assert normalize(raw) == {"meta": {"schema": {"title": {"tooLong": True}}}}

    def test_none_is_empty_tree(self):
        assert normalize(None) == {}

    def test_terminal_passthrough(self):
        assert CODED.normalize(True) is True
        assert CODED.normalize("text") == "text"

    def test_normalizes_in_place(self):
        raw = {"name": {"minLength": True}}
        assert normalize(raw) is raw


class TestGenericNormalization:
    def test_flattens_without_remapping(self):
        raw = {"address": {"schema": {"city": {"minLength": True}}}}
        assert GENERIC.normalize(raw) == {"address": {"city": {"minLength": True}}}

    def test_index_bucket_still_invalid(self):
        assert GENERIC.normalize({"tags": {"schema": {"1": {"type": True}}}}) == {"tags": {"invalid": True}}

    def test_custom_code_table(self):
        normalizer = Normalizer({**CODE_MAP, "pattern": "malformed"})
        assert normalizer.normalize({"email": {"pattern": True}}) == {"email": {"malformed": True}}
