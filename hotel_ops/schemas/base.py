from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base schema exchanging camelCase JSON while keeping snake_case attributes.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
