"""Nebraska application resource and data source."""

import logging
from typing import Optional

from pydantic import Field, field_validator

from nebraska_provider.api.models import AppConfig, Application
from nebraska_provider.resources.base import DataSource, Resource, ResourceState, format_timestamp
from nebraska_provider.resources.validators import validate_not_empty, validate_product_id

logger = logging.getLogger(__name__)

COMPUTED = {"computed": True, "read_only": True}


class ApplicationState(ResourceState):
    """A Nebraska application."""

    id: Optional[str] = Field(None, description="ID of the application.", json_schema_extra=COMPUTED)
    name: str = Field(description="Name of the application.")
    product_id: str = Field(
        description="Product ID of the application, in the form e.g. `io.example.App`."
    )
    description: Optional[str] = Field(None, description="A description of the application.")
    created_ts: Optional[str] = Field(None, description="Creation timestamp.", json_schema_extra=COMPUTED)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return validate_not_empty(v)

    @field_validator("product_id")
    @classmethod
    def validate_product_id_format(cls, v: str) -> str:
        return validate_product_id(v)


def application_config(state: ApplicationState) -> AppConfig:
    return AppConfig(
        name=state.name,
        description=state.description,
        product_id=state.product_id,
    )


def application_state(app: Application) -> ApplicationState:
    return ApplicationState.model_construct(
        id=app.id,
        name=app.name,
        product_id=app.product_id or "",
        description=app.description,
        created_ts=format_timestamp(app.created_ts),
    )


class ApplicationResource(Resource[ApplicationState]):
    type_name = "nebraska_application"
    description = "A nebraska application"
    state_model = ApplicationState

    def create(self, state: ApplicationState) -> ApplicationState:
        app = self.client.create_app(application_config(state))
        logger.info(f"Created application {app.id} ({app.product_id})")
        return application_state(app)

    def read(self, state: ApplicationState) -> ApplicationState:
        return application_state(self.client.get_app(state.product_id))

    def update(self, state: ApplicationState) -> ApplicationState:
        app_id = self._require_id(state)
        app = self.client.update_app(app_id, application_config(state))
        logger.info(f"Updated application {app.id}")
        return application_state(app)

    def delete(self, state: ApplicationState) -> None:
        app_id = self._require_id(state)
        self.client.delete_app(app_id)
        logger.info(f"Deleted application {app_id}")


class ApplicationDataSource(DataSource[ApplicationState]):
    type_name = "nebraska_application"
    description = "A nebraska application"
    state_model = ApplicationState
    lookup_keys = ("product_id",)

    def read(self, product_id: str) -> ApplicationState:
        return application_state(self.client.get_app(product_id))
