"""Tests for the catalog item service against an in-memory database."""

import re

import pytest

from catalog_manager.core.errors import CatalogError, ErrorKind
from catalog_manager.core.merge import CatalogItemPatch
from catalog_manager.db.models import CatalogItemInstanceModel
from catalog_manager.domain import v1alpha1
from catalog_manager.services import CreateCatalogItemRequest

UUID_PATTERN = re.compile(r"^[a-f0-9]{8}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{12}$")

pytestmark = pytest.mark.usefixtures("service_types")


def create_request(
    display_name: str = "Item",
    service_type: str | None = "vm",
    fields: list[v1alpha1.FieldConfiguration] | None = None,
    item_id: str | None = None,
) -> CreateCatalogItemRequest:
    if fields is None:
        fields = [v1alpha1.FieldConfiguration(path="spec.vcpu", default=2)]
    return CreateCatalogItemRequest(
        id=item_id,
        display_name=display_name,
        spec=v1alpha1.CatalogItemSpec(service_type=service_type, fields=fields),
    )


async def expect_error(kind: ErrorKind, awaitable) -> CatalogError:
    with pytest.raises(CatalogError) as exc_info:
        await awaitable
    assert exc_info.value.kind is kind
    return exc_info.value


class TestCreate:
    async def test_uses_supplied_dns_label_id(self, service):
        result = await service.catalog_items.create(
            create_request(display_name="Test Catalog Item", item_id="my-catalog-item")
        )

        assert result.id == "my-catalog-item"
        assert result.path == "catalog-items/my-catalog-item"
        assert result.display_name == "Test Catalog Item"
        assert result.api_version == "v1alpha1"
        assert result.spec.service_type == "vm"
        assert len(result.spec.fields) == 1
        assert result.create_time is not None
        assert result.update_time is not None

    async def test_generates_uuid_when_id_omitted(self, service):
        result = await service.catalog_items.create(
            create_request(
                service_type="container",
                fields=[v1alpha1.FieldConfiguration(path="spec.image", default="nginx")],
            )
        )

        assert UUID_PATTERN.match(result.id)
        assert result.path == f"catalog-items/{result.id}"

    async def test_duplicate_id_is_id_taken(self, service):
        await service.catalog_items.create(create_request(display_name="First", item_id="taken-id"))

        await expect_error(
            ErrorKind.ID_TAKEN,
            service.catalog_items.create(
                create_request(display_name="Second", service_type="container", item_id="taken-id")
            ),
        )

    async def test_unknown_service_type_is_service_type_not_found(self, service):
        await expect_error(
            ErrorKind.SERVICE_TYPE_NOT_FOUND,
            service.catalog_items.create(create_request(service_type="nonexistent")),
        )

    async def test_invalid_id_is_rejected_before_storage(self, service):
        await expect_error(
            ErrorKind.INVALID_ARGUMENT,
            service.catalog_items.create(create_request(item_id="Not_A_Label")),
        )
        listing = await service.catalog_items.list()
        assert listing.catalog_items == []

    async def test_empty_field_path_is_invalid_argument(self, service):
        error = await expect_error(
            ErrorKind.INVALID_ARGUMENT,
            service.catalog_items.create(
                create_request(fields=[v1alpha1.FieldConfiguration(path="", default=1)])
            ),
        )
        assert "invalid field path" in error.detail

    async def test_field_configuration_is_preserved(self, service):
        field = v1alpha1.FieldConfiguration(
            path="database.version",
            default="18",
            display_name="Database version",
            editable=True,
            validation_schema={"type": "string"},
            depends_on=v1alpha1.DependsOn(
                path="database.engine",
                mapping={"postgres": ["16", "17", "18"], "mysql": ["8.0", "8.4"]},
            ),
        )
        created = await service.catalog_items.create(create_request(fields=[field]))

        fetched = await service.catalog_items.get(created.id)

        assert fetched.spec.fields[0].model_dump() == field.model_dump()


class TestList:
    async def test_lists_all(self, service):
        await service.catalog_items.create(create_request(display_name="Item 1"))
        await service.catalog_items.create(
            create_request(display_name="Item 2", service_type="container")
        )

        result = await service.catalog_items.list()

        assert len(result.catalog_items) == 2
        assert result.next_page_token is None

    async def test_filters_by_service_type(self, service):
        await service.catalog_items.create(create_request(display_name="VM Item"))
        await service.catalog_items.create(
            create_request(display_name="Container Item", service_type="container")
        )

        result = await service.catalog_items.list(service_type="vm")

        assert len(result.catalog_items) == 1
        assert result.catalog_items[0].spec.service_type == "vm"

    async def test_chained_pages_cover_collection_once(self, service):
        created = []
        for i in range(6):
            item = await service.catalog_items.create(create_request(display_name=f"Item {i}"))
            created.append(item.id)

        first = await service.catalog_items.list(max_page_size=2)
        assert len(first.catalog_items) == 2
        assert first.next_page_token

        second = await service.catalog_items.list(
            max_page_size=3, page_token=first.next_page_token
        )
        assert len(second.catalog_items) == 3
        assert second.next_page_token

        third = await service.catalog_items.list(
            max_page_size=4, page_token=second.next_page_token
        )
        assert len(third.catalog_items) == 1
        assert third.next_page_token is None

        seen = [i.id for page in (first, second, third) for i in page.catalog_items]
        assert len(seen) == len(set(seen)) == 6
        assert set(seen) == set(created)

    @pytest.mark.parametrize("sizes", [[1], [5, 1], [2, 2, 2], [4, 4], [6], [100]])
    async def test_any_page_sizes_enumerate_in_stable_order(self, service, sizes):
        for i in range(6):
            await service.catalog_items.create(create_request(display_name=f"Item {i}"))
        full = [i.id for i in (await service.catalog_items.list()).catalog_items]

        seen: list[str] = []
        token = None
        step = 0
        while True:
            page = await service.catalog_items.list(
                max_page_size=sizes[min(step, len(sizes) - 1)], page_token=token
            )
            seen.extend(i.id for i in page.catalog_items)
            token = page.next_page_token
            step += 1
            if token is None:
                break

        assert seen == full

    async def test_exact_page_has_no_next_token(self, service):
        for i in range(2):
            await service.catalog_items.create(create_request(display_name=f"Item {i}"))

        result = await service.catalog_items.list(max_page_size=2)

        assert len(result.catalog_items) == 2
        assert result.next_page_token is None

    async def test_bad_page_inputs_are_invalid_argument(self, service):
        await expect_error(ErrorKind.INVALID_ARGUMENT, service.catalog_items.list(max_page_size=0))
        await expect_error(
            ErrorKind.INVALID_ARGUMENT, service.catalog_items.list(page_token="garbage!")
        )


class TestGet:
    async def test_returns_item(self, service):
        created = await service.catalog_items.create(create_request(display_name="Test Item"))

        result = await service.catalog_items.get(created.id)

        assert result.id == created.id
        assert result.display_name == "Test Item"

    async def test_missing_is_not_found(self, service):
        await expect_error(ErrorKind.NOT_FOUND, service.catalog_items.get("nonexistent"))


class TestUpdate:
    async def test_display_name_only(self, service):
        await service.catalog_items.create(create_request(display_name="Old Name", item_id="item1"))

        result = await service.catalog_items.update(
            "item1", CatalogItemPatch(display_name="Updated Name")
        )

        assert result.display_name == "Updated Name"
        assert [f.path for f in result.spec.fields] == ["spec.vcpu"]
        assert result.spec.service_type == "vm"

    async def test_fields_replaced_wholesale(self, service):
        await service.catalog_items.create(
            create_request(
                item_id="item1",
                fields=[
                    v1alpha1.FieldConfiguration(path="spec.vcpu", default=2),
                    v1alpha1.FieldConfiguration(path="spec.disk", default="20GB"),
                ],
            )
        )

        result = await service.catalog_items.update(
            "item1",
            CatalogItemPatch(
                spec=v1alpha1.CatalogItemSpec(
                    service_type="vm",
                    fields=[
                        v1alpha1.FieldConfiguration(path="spec.vcpu", default=4),
                        v1alpha1.FieldConfiguration(path="spec.memory", default="8GB"),
                    ],
                )
            ),
        )

        assert [f.path for f in result.spec.fields] == ["spec.vcpu", "spec.memory"]
        assert result.spec.fields[0].default == 4

    async def test_update_time_comes_from_storage(self, service):
        created = await service.catalog_items.create(create_request(item_id="item1"))

        result = await service.catalog_items.update("item1", CatalogItemPatch(display_name="New"))
        fetched = await service.catalog_items.get("item1")

        assert result.update_time == fetched.update_time
        assert result.create_time == fetched.create_time
        assert fetched.update_time >= fetched.create_time
        assert created.id == fetched.id

    @pytest.mark.parametrize("display_name", [None, "Also Renamed"])
    async def test_changing_service_type_is_immutable(self, service, display_name):
        await service.catalog_items.create(create_request(display_name="Name", item_id="item1"))

        await expect_error(
            ErrorKind.IMMUTABLE_FIELD_UPDATE,
            service.catalog_items.update(
                "item1",
                CatalogItemPatch(
                    display_name=display_name,
                    spec=v1alpha1.CatalogItemSpec(
                        service_type="container",
                        fields=[v1alpha1.FieldConfiguration(path="spec.image", default="nginx")],
                    ),
                ),
            ),
        )
        unchanged = await service.catalog_items.get("item1")
        assert unchanged.display_name == "Name"

    async def test_missing_is_not_found(self, service):
        await expect_error(
            ErrorKind.NOT_FOUND,
            service.catalog_items.update("nonexistent", CatalogItemPatch(display_name="New")),
        )


class TestDelete:
    async def test_deletes(self, service):
        await service.catalog_items.create(create_request(item_id="item1"))

        await service.catalog_items.delete("item1")

        await expect_error(ErrorKind.NOT_FOUND, service.catalog_items.get("item1"))

    async def test_missing_is_not_found(self, service):
        await expect_error(ErrorKind.NOT_FOUND, service.catalog_items.delete("nonexistent"))

    async def test_with_instances_is_blocked(self, service, session):
        await service.catalog_items.create(create_request(item_id="item1"))
        session.add(CatalogItemInstanceModel(id="inst-1", catalog_item_id="item1"))
        await session.commit()

        await expect_error(ErrorKind.HAS_INSTANCES, service.catalog_items.delete("item1"))
        assert (await service.catalog_items.get("item1")).id == "item1"
