from collection_openapi.openapi.validator import (
    validate_document,
    validate_path_params,
    validate_refs,
    validate_security,
    validate_structure,
)


def _doc(**overrides) -> dict:
    doc = {
        "openapi": "3.1.0",
        "info": {"title": "t", "version": "1"},
        "servers": [],
        "paths": {},
        "components": {"schemas": {}, "securitySchemes": {}, "examples": {}},
    }
    doc.update(overrides)
    return doc


class TestValidateStructure:
    def test_valid(self):
        assert validate_structure(_doc()) == {}

    def test_missing_keys(self):
        errors = validate_structure({"openapi": "3.1.0"})
        assert set(errors) == {"info", "paths", "components"}

    def test_duplicate_servers(self):
        errors = validate_structure(_doc(servers=[{"url": "https://a"}, {"url": "https://a"}]))
        assert "servers" in errors

    def test_null_sections_are_reported(self):
        errors = validate_structure(_doc(paths=None, components=None))
        assert errors == {
            "paths": "'paths' must be a mapping",
            "components": "'components' must be a mapping",
        }

    def test_servers_must_be_a_list_of_mappings(self):
        assert "servers" in validate_structure(_doc(servers=None))
        assert "servers" in validate_structure(_doc(servers=["https://a"]))

    def test_path_item_must_be_a_mapping(self):
        errors = validate_structure(_doc(paths={"/a": None, "/b": {"get": "nope"}}))
        assert set(errors) == {"paths./a", "paths./b"}

    def test_malformed_document_does_not_reach_deeper_checks(self):
        errors = validate_document(_doc(paths={"/users/{id}": ["get"]}, components=[]))
        assert set(errors) == {"components", "paths./users/{id}"}


class TestValidateRefs:
    def test_resolved_refs(self):
        doc = _doc(
            paths={"/a": {"get": {"responses": {"200": {"content": {"application/json": {
                "schema": {"$ref": "#/components/schemas/A"},
                "examples": {"ok": {"$ref": "#/components/examples/A_ok"}},
            }}}}}}},
            components={"schemas": {"A": {}}, "examples": {"A_ok": {"value": 1}}, "securitySchemes": {}},
        )
        assert validate_refs(doc) == {}

    def test_dangling_ref(self):
        doc = _doc(paths={"/a": {"post": {"requestBody": {"content": {"application/json": {
            "schema": {"$ref": "#/components/schemas/Missing"},
        }}}}}})
        errors = validate_refs(doc)
        assert list(errors.values()) == ["unresolved reference '#/components/schemas/Missing'"]

    def test_refs_inside_examples_are_ignored(self):
        doc = _doc(paths={"/a": {"post": {"requestBody": {"content": {"application/json": {
            "schema": {"type": "string"},
            "example": {"$ref": "user data"},
        }}}}}})
        assert validate_refs(doc) == {}


class TestValidatePathParams:
    def test_missing_path_param(self):
        doc = _doc(paths={"/users/{id}": {"get": {"responses": {}}}})
        errors = validate_path_params(doc)
        assert errors == {"paths./users/{id}.get": "missing path parameters: id"}

    def test_declared_path_param(self):
        doc = _doc(paths={"/users/{id}": {"get": {
            "parameters": [{"name": "id", "in": "path", "required": True}],
        }}})
        assert validate_path_params(doc) == {}

    def test_unsupported_method(self):
        errors = validate_path_params(_doc(paths={"/a": {"connect": {}}}))
        assert "paths./a.connect" in errors


class TestValidateSecurity:
    def test_undefined_scheme(self):
        doc = _doc(paths={"/a": {"get": {"security": [{"bearerAuth": []}]}}})
        assert "paths./a.get.security" in validate_security(doc)

    def test_defined_scheme(self):
        doc = _doc(
            paths={"/a": {"get": {"security": [{"bearerAuth": []}]}}},
            components={"schemas": {}, "examples": {}, "securitySchemes": {"bearerAuth": {}}},
        )
        assert validate_security(doc) == {}


class TestValidateDocument:
    def test_all_valid(self):
        assert validate_document(_doc()) == {}

    def test_structure_errors_short_circuit(self):
        errors = validate_document({"paths": {"/users/{id}": {"get": {}}}})
        assert "paths./users/{id}.get" not in errors
        assert "openapi" in errors
