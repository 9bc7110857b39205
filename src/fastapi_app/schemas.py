from pydantic import BaseModel


class MailRequest(BaseModel):
    to: str
    subject: str
    message: str
