from __future__ import annotations

from packages.shared.schemas.catalog_v1 import OrderStatusV1
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class OrderStatusUpdateRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: OrderStatusV1
