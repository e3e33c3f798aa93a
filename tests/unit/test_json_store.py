"""
Unit tests for the JSON document sink.
"""

import contextlib
import json
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from condition_log.storage import JsonDocumentSink, JsonFormatError, PersistenceError, encode_object
from condition_log.storage import json_store
from condition_log.storage.json_store import splice_document


class TestEncodeObject:
    """Tests for encode_object"""

    def test_compact_flat_object(self):
        assert encode_object({"uuid": "u", "status": "Online"}) == '{"uuid":"u","status":"Online"}'

    def test_escapes_quotes_backslashes_and_controls(self):
        encoded = encode_object({"comment": 'a"b\\c\b\f\n\r\t\x01'})

        assert encoded == '{"comment":"a\\"b\\\\c\\b\\f\\n\\r\\t\\u0001"}'

    def test_non_ascii_kept_verbatim(self):
        assert encode_object({"device_name": "Pumpe Süd"}) == '{"device_name":"Pumpe Süd"}'

    def test_key_order_preserved(self):
        encoded = encode_object({"b": "1", "a": "2"})

        assert list(json.loads(encoded)) == ["b", "a"]

    def test_non_string_value_rejected(self):
        with pytest.raises(TypeError):
            encode_object({"voltage": 12.3})


class TestSpliceDocument:
    """Tests for splice_document"""

    @pytest.mark.parametrize("existing", [None, "", "  \n", "[]", "[]\n", "[ ]", "[\n]"])
    def test_empty_documents_start_fresh(self, existing):
        assert splice_document(existing, '{"a":"1"}') == ('[{"a":"1"}]', False)

    def test_appends_before_closing_bracket(self):
        assert splice_document('[{"a":"1"}]\n', '{"a":"2"}') == ('[{"a":"1"},{"a":"2"}]', False)

    @pytest.mark.parametrize("existing", ["{}", "not json", '[{"a":"1"}', "null"])
    def test_malformed_content_is_flagged(self, existing):
        document, malformed = splice_document(existing, '{"a":"2"}')

        assert document == '[{"a":"2"}]'
        assert malformed is True


class TestJsonDocumentSink:
    """Tests for JsonDocumentSink"""

    def test_appends_preserve_existing_entries(self, tmp_path):
        sink = JsonDocumentSink(tmp_path / "out" / "devices.json")

        for i in range(3):
            result = sink.append_object(encode_object({"uuid": str(i)}))
            assert result.replaced_malformed is False

        assert sink.read_document() == [{"uuid": "0"}, {"uuid": "1"}, {"uuid": "2"}]

    def test_empty_array_file_becomes_one_element_array(self, tmp_path):
        path = tmp_path / "devices.json"
        path.write_bytes(b"[]")

        JsonDocumentSink(path).append_object('{"uuid":"1"}')

        assert path.read_text(encoding="utf-8") == '[{"uuid":"1"}]'

    def test_no_temporary_file_left_behind(self, tmp_path):
        sink = JsonDocumentSink(tmp_path / "devices.json")

        sink.append_object('{"uuid":"1"}')

        assert sorted(p.name for p in tmp_path.iterdir()) == ["devices.json"]

    def test_malformed_document_is_replaced_backed_up_and_logged(self, tmp_path, caplog):
        path = tmp_path / "devices.json"
        path.write_text('{"legacy": true}', encoding="utf-8")

        with caplog.at_level(logging.WARNING, logger="condition_log.storage.json_store"):
            result = JsonDocumentSink(path).append_object('{"uuid":"1"}')

        assert result.replaced_malformed is True
        assert result.backup_path is not None
        assert result.backup_path.read_text(encoding="utf-8") == '{"legacy": true}'
        assert json.loads(path.read_text(encoding="utf-8")) == [{"uuid": "1"}]
        assert any("not a JSON array" in record.getMessage() for record in caplog.records)

    def test_non_utf8_document_is_treated_as_malformed(self, tmp_path):
        path = tmp_path / "devices.json"
        path.write_bytes(b"[\xff\xfe]")

        result = JsonDocumentSink(path).append_object('{"uuid":"1"}')

        assert result.replaced_malformed is True
        assert result.backup_path.read_bytes() == b"[\xff\xfe]"

    def test_falls_back_to_copy_when_replace_fails(self, tmp_path, monkeypatch, caplog):
        path = tmp_path / "devices.json"
        path.write_text('[{"uuid":"0"}]', encoding="utf-8")

        def refuse_replace(src, dst):
            raise PermissionError("replace not permitted")

        monkeypatch.setattr(os, "replace", refuse_replace)

        sink = JsonDocumentSink(path)
        with caplog.at_level(logging.WARNING, logger="condition_log.storage.json_store"):
            sink.append_object('{"uuid":"1"}')

        assert sink.read_document() == [{"uuid": "0"}, {"uuid": "1"}]
        assert list(tmp_path.glob("*.tmp")) == []
        assert any("falling back to copy" in record.getMessage() for record in caplog.records)

    def test_each_append_uses_its_own_temporary_file(self, tmp_path, monkeypatch):
        path = tmp_path / "devices.json"
        replaced_from = []
        real_replace = os.replace

        def recording_replace(src, dst):
            replaced_from.append(Path(src))
            real_replace(src, dst)

        monkeypatch.setattr(os, "replace", recording_replace)

        sink = JsonDocumentSink(path)
        sink.append_object('{"uuid":"1"}')
        sink.append_object('{"uuid":"2"}')

        assert len(set(replaced_from)) == 2
        for temp in replaced_from:
            assert temp.parent == tmp_path
            assert temp.name.startswith("devices.json.")
            assert temp.name.endswith(".tmp")

    def test_unsynchronized_writers_leave_a_complete_document(self, tmp_path, monkeypatch):
        # Without the in-process lock, two sinks behave like two processes sharing the file
        monkeypatch.setattr(json_store, "path_lock", lambda path: contextlib.nullcontext())
        path = tmp_path / "devices.json"

        def append_many(writer: str) -> None:
            sink = JsonDocumentSink(path)
            for i in range(50):
                sink.append_object(encode_object({"uuid": f"{writer}-{i}"}))

        with ThreadPoolExecutor(max_workers=2) as pool:
            for future in [pool.submit(append_many, writer) for writer in ("a", "b")]:
                future.result()

        document = JsonDocumentSink(path).read_document()
        assert 1 <= len(document) <= 100
        assert len({item["uuid"] for item in document}) == len(document)
        assert list(tmp_path.glob("*.tmp")) == []
        assert list(tmp_path.glob("*.malformed-*")) == []

    def test_unreadable_destination_raises_persistence_error(self, tmp_path):
        path = tmp_path / "devices.json"
        path.mkdir()

        with pytest.raises(PersistenceError) as exc_info:
            JsonDocumentSink(path).append_object('{"uuid":"1"}')

        assert exc_info.value.sink == "json"

    def test_read_document_rejects_non_array(self, tmp_path):
        path = tmp_path / "devices.json"
        path.write_text('{"uuid": "1"}', encoding="utf-8")

        with pytest.raises(JsonFormatError):
            JsonDocumentSink(path).read_document()
