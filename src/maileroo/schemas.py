from pydantic import BaseModel, Field


class MailerooAddress(BaseModel):
    address: str
    display_name: str | None = None


class MailerooPayload(BaseModel):
    from_: MailerooAddress = Field(..., alias="from")
    to: list[MailerooAddress]
    subject: str
    html: str
    plain: str
    tracking: bool = True

    model_config = {"populate_by_name": True}
