from pydantic import BaseModel, ConfigDict, Field


class HostDescriptor(BaseModel):
    """What this host reports about itself on ``/host``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    public_ip: str = Field(alias="PublicIP", description="Default interface IPv4")

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)
