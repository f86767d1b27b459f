"""
Test suite for document allow-list projection.

System role: Verification of the stored document shape
"""

import pytest

from histograph.boundary.docstore.projection import project_document
from histograph.core.exceptions import ValidationError


class TestProjectDocument:
    """Test suite for project_document()."""

    def test_project_should_keep_only_core_fields(self) -> None:
        """Test the example PIT projects to hgid, source, name and type only."""
        fields = {
            "hgid": "pit/42",
            "type": "pit",
            "name": "Amsterdam",
            "source": "src1",
            "data": "<raw>",
        }

        document = project_document(fields)

        assert document == {"hgid": "pit/42", "source": "src1", "name": "Amsterdam", "type": "pit"}

    def test_project_should_store_sourceid_as_source(self) -> None:
        """Test the internal sourceid token is stored under source."""
        document = project_document({"hgid": "pit/1", "sourceid": "tgn"})

        assert document == {"hgid": "pit/1", "source": "tgn"}

    def test_project_should_prefer_sourceid_over_source(self) -> None:
        """Test sourceid wins when both spellings are present."""
        document = project_document({"hgid": "pit/1", "sourceid": "tgn", "source": "other"})

        assert document["source"] == "tgn"

    def test_project_should_parse_geometry_into_nested_object(self) -> None:
        """Test geometry strings are stored as structured JSON."""
        fields = {"hgid": "pit/1", "geometry": '{"type":"Point","coordinates":[4.9,52.37]}'}

        document = project_document(fields)

        assert document["geometry"] == {"type": "Point", "coordinates": [4.9, 52.37]}

    def test_project_should_accept_already_structured_geometry(self) -> None:
        """Test an already decoded geometry is stored as-is."""
        geometry = {"type": "Point", "coordinates": [0, 0]}

        document = project_document({"hgid": "pit/1", "geometry": geometry})

        assert document["geometry"] == geometry

    def test_project_should_copy_optional_fields_when_present(self) -> None:
        """Test uri, hasBeginning and hasEnd are copied when present."""
        fields = {
            "hgid": "pit/1",
            "uri": "http://example.org/1",
            "hasBeginning": "1500",
            "hasEnd": "1600",
        }

        document = project_document(fields)

        assert document["uri"] == "http://example.org/1"
        assert document["hasBeginning"] == "1500"
        assert document["hasEnd"] == "1600"

    def test_project_should_drop_fields_outside_allow_list(self) -> None:
        """Test relation and bookkeeping fields never reach the document."""
        fields = {
            "hgid": "pit/1",
            "action": "add",
            "target": "both",
            "from": "pit/2",
            "label": "hg:liesIn",
            "data": "{}",
        }

        document = project_document(fields)

        assert document == {"hgid": "pit/1"}

    def test_project_should_reject_invalid_geometry(self) -> None:
        """Test malformed geometry JSON raises ValidationError."""
        with pytest.raises(ValidationError) as exc_info:
            project_document({"hgid": "pit/1", "geometry": "{not json"})

        assert exc_info.value.details["field"] == "geometry"
