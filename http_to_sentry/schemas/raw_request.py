from pydantic import BaseModel, ConfigDict


class RawRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    body: bytes
    content_type: str = ""
    remote_addr: str = ""
    method: str = "POST"
    path: str = "/"

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")
