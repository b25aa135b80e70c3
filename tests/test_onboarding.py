"""
Test suite for onboarding templates and the field catalog.

Tests cover:
- Catalog composition per role category
- Response validation rules
- Template CRUD, versioning and usage counting
"""

import uuid

import pytest

from app.models.onboarding_template import RoleCategory
from app.schemas.onboarding import OnboardingField
from app.services.onboarding_fields import get_fields, validate_responses


def field(**values):
    values.setdefault("order", 1)
    values.setdefault("section", "Test")
    return OnboardingField(**values)


class TestFieldCatalog:
    """Tests for get_fields"""

    @pytest.mark.parametrize("category, count", [
        (RoleCategory.GENERAL, 16),
        (RoleCategory.SECURITY, 26),
        (RoleCategory.BAR, 25),
        (RoleCategory.TECHNICAL, 24),
        (RoleCategory.MANAGEMENT, 25),
    ])
    def test_field_counts(self, category, count):
        """Test each category is the general set plus its extension"""
        fields = get_fields(category)
        assert len(fields) == count
        assert [f.id for f in fields[:16]] == [f.id for f in get_fields("general")]

    def test_orders_unique(self):
        """Test field order values are unique within a category"""
        orders = [f.order for f in get_fields("security")]
        assert len(orders) == len(set(orders))

    def test_fresh_copies(self):
        """Test editing a returned field does not change the catalog"""
        fields = get_fields("bar")
        fields[0].label = "Changed"
        assert get_fields("bar")[0].label == "Full Legal Name"

    def test_unknown_category(self):
        """Test an unknown category raises"""
        with pytest.raises(ValueError):
            get_fields("kitchen")


class TestValidateResponses:
    """Tests for validate_responses"""

    def test_required_blank(self):
        """Test blank strings and empty lists count as missing"""
        fields = [
            field(id="name", type="text", label="Name", required=True),
            field(id="days", type="multiselect", label="Days", required=True, options=["Mon"]),
            field(id="nick", type="text", label="Nickname"),
        ]
        errors = validate_responses(fields, {"name": "  ", "days": []})
        assert errors == {"name": "Name is required", "days": "Days is required"}

    def test_checkbox_must_be_true(self):
        """Test required checkboxes need a literal true"""
        fields = [field(id="agree", type="checkbox", label="Agree", required=True)]
        assert validate_responses(fields, {"agree": "yes"}) == {"agree": "Agree must be checked"}
        assert validate_responses(fields, {"agree": True}) == {}

    def test_email(self):
        """Test email fields are syntax checked"""
        fields = [field(id="email", type="email", label="Email")]
        assert "valid email" in validate_responses(fields, {"email": "nope@"})["email"]
        assert validate_responses(fields, {"email": "ok@example.com"}) == {}

    def test_select_and_multiselect(self):
        """Test options are enforced"""
        fields = [
            field(id="shift", type="select", label="Shift", options=["Day", "Night"]),
            field(id="days", type="multiselect", label="Days", options=["Mon", "Tue"]),
        ]
        errors = validate_responses(fields, {"shift": "Dusk", "days": ["Mon", "Sun"]})
        assert errors["shift"] == "Shift must be one of: Day, Night"
        assert errors["days"] == "Days has invalid options: Sun"

    def test_pattern(self):
        """Test regex validation"""
        fields = [field(id="ssn", type="text", label="SSN", validation={"pattern": r"^\d{3}-\d{2}-\d{4}$"})]
        assert validate_responses(fields, {"ssn": "123456789"}) == {"ssn": "SSN has an invalid format"}
        assert validate_responses(fields, {"ssn": "123-45-6789"}) == {}

    def test_number_bounds(self):
        """Test min and max on number fields"""
        fields = [field(id="years", type="number", label="Years", validation={"min": 0, "max": 50})]
        assert validate_responses(fields, {"years": "-1"}) == {"years": "Years must be at least 0"}
        assert validate_responses(fields, {"years": 51}) == {"years": "Years must be at most 50"}
        assert validate_responses(fields, {"years": "abc"}) == {"years": "Years must be a number"}
        assert validate_responses(fields, {"years": "12"}) == {}

    def test_number_without_bounds(self):
        """Test number fields reject non-numeric answers even without min or max"""
        fields = [field(id="shoe_size", type="number", label="Shoe Size")]
        assert validate_responses(fields, {"shoe_size": "large"}) == {"shoe_size": "Shoe Size must be a number"}
        assert validate_responses(fields, {"shoe_size": "10.5"}) == {}

    def test_optional_blank_skipped(self):
        """Test blank optional fields skip every other rule"""
        fields = [field(id="email", type="email", label="Email")]
        assert validate_responses(fields, {}) == {}


@pytest.fixture
def templates_url(venue):
    return f"/api/v1/venues/{venue['id']}/onboarding-templates"


@pytest.fixture
def template_data():
    return {
        "name": "Door Staff Onboarding",
        "department": "Security",
        "position": "Door Staff",
        "role_category": "security",
        "tags": ["security", "door"],
    }


class TestCatalogEndpoint:
    """Tests for GET /onboarding/field-catalog"""

    def test_catalog(self, client, owner_headers):
        """Test the catalog is served for a role"""
        response = client.get("/api/v1/onboarding/field-catalog/technical", headers=owner_headers)
        assert response.status_code == 200
        assert len(response.json()) == 24

    def test_catalog_requires_token(self, client):
        """Test the catalog needs a signed-in user"""
        assert client.get("/api/v1/onboarding/field-catalog/general").status_code == 401

    def test_unknown_role(self, client, owner_headers):
        """Test unknown roles are a validation error"""
        assert client.get("/api/v1/onboarding/field-catalog/kitchen", headers=owner_headers).status_code == 422


class TestTemplates:
    """Tests for onboarding template endpoints"""

    def test_create_from_catalog(self, client, owner_id, owner_headers, templates_url, template_data):
        """Test a template without fields starts from its category's catalog"""
        response = client.post(templates_url, json=template_data, headers=owner_headers)
        assert response.status_code == 201
        data = response.json()
        assert len(data["fields"]) == 26
        assert data["version"] == 1
        assert data["use_count"] == 0
        assert data["created_by"] == str(owner_id)

    def test_create_with_fields(self, client, owner_headers, templates_url, template_data):
        """Test explicit fields replace the catalog"""
        fields = [{"id": "name", "type": "text", "label": "Name", "required": True, "order": 1, "section": "Basics"}]
        response = client.post(templates_url, json=dict(template_data, fields=fields), headers=owner_headers)
        assert [f["id"] for f in response.json()["fields"]] == ["name"]

    def test_update_fields_bumps_version(self, client, owner_headers, templates_url, template_data):
        """Test only a change to fields bumps the version"""
        template = client.post(templates_url, json=template_data, headers=owner_headers).json()
        url = f"{templates_url}/{template['id']}"

        renamed = client.patch(url, json={"name": "Door Team"}, headers=owner_headers).json()
        assert renamed["version"] == 1

        same = client.patch(url, json={"fields": template["fields"]}, headers=owner_headers).json()
        assert same["version"] == 1

        new_fields = template["fields"][:3]
        changed = client.patch(url, json={"fields": new_fields}, headers=owner_headers).json()
        assert changed["version"] == 2
        assert len(changed["fields"]) == 3

    def test_use_increments(self, client, owner_headers, templates_url, template_data):
        """Test recording template use"""
        template = client.post(templates_url, json=template_data, headers=owner_headers).json()
        client.post(f"{templates_url}/{template['id']}/use", headers=owner_headers)
        response = client.post(f"{templates_url}/{template['id']}/use", headers=owner_headers)
        assert response.json()["use_count"] == 2

    def test_list_filters(self, client, owner_headers, templates_url, template_data):
        """Test filtering by tag and role category"""
        client.post(templates_url, json=template_data, headers=owner_headers)
        response = client.get(templates_url, params={"tag": "door"}, headers=owner_headers)
        assert [t["name"] for t in response.json()] == ["Door Staff Onboarding"]

        response = client.get(templates_url, params={"role_category": "security"}, headers=owner_headers)
        assert len(response.json()) == 2

    def test_defaults_added_again(self, client, owner_headers, templates_url):
        """Test the starter set can be added again"""
        response = client.post(f"{templates_url}/defaults", headers=owner_headers)
        assert response.status_code == 201
        assert len(response.json()) == 5
        assert len(client.get(templates_url, headers=owner_headers).json()) == 10

    def test_validate(self, client, owner_headers, templates_url):
        """Test validating responses against a stored template"""
        fields = [
            {"id": "email", "type": "email", "label": "Email", "required": True, "order": 1, "section": "A"},
            {"id": "agree", "type": "checkbox", "label": "Agree", "required": True, "order": 2, "section": "A"},
        ]
        template = client.post(
            templates_url,
            json={"name": "Mini", "department": "General", "position": "Staff", "fields": fields},
            headers=owner_headers,
        ).json()
        url = f"{templates_url}/{template['id']}/validate"

        response = client.post(url, json={"responses": {"email": "a@example.com"}}, headers=owner_headers)
        assert response.status_code == 200
        assert response.json() == {"valid": False, "errors": {"agree": "Agree must be checked"}}

        response = client.post(
            url, json={"responses": {"email": "a@example.com", "agree": True}}, headers=owner_headers
        )
        assert response.json() == {"valid": True, "errors": {}}

    def test_delete(self, client, owner_headers, templates_url, template_data):
        """Test deleting a template"""
        template = client.post(templates_url, json=template_data, headers=owner_headers).json()
        assert client.delete(f"{templates_url}/{template['id']}", headers=owner_headers).status_code == 204
        assert client.get(f"{templates_url}/{template['id']}", headers=owner_headers).status_code == 404

    def test_unknown_template(self, client, owner_headers, templates_url):
        """Test unknown ids are 404"""
        response = client.post(f"{templates_url}/{uuid.uuid4()}/use", headers=owner_headers)
        assert response.status_code == 404
