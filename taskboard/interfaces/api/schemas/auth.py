"""Authentication related schemas."""

from pydantic import BaseModel, EmailStr, Field, model_validator


class Token(BaseModel):
    access_token: str
    token_type: str
    role: str


class SignupRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr = Field(..., description="Correo electrónico con el que se iniciará sesión")
    password: str = Field(..., min_length=6, max_length=100)
    confirm_password: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def _passwords_match(self) -> "SignupRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class SignupResponse(BaseModel):
    id: int
    name: str | None
    email: EmailStr
    approved: bool
    message: str
