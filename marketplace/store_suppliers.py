from __future__ import annotations

import hmac
import re
from datetime import UTC, datetime
from typing import Any

from marketplace.directory import list_visible_suppliers
from marketplace.errors import ConflictError, UnauthorizedError, ValidationError
from marketplace.ids import new_id
from marketplace.repositories import (
    DocumentSuppliersRepository,
    DocumentTariffsRepository,
    DocumentUsersRepository,
)
from marketplace.sanitize import as_non_negative_number, as_text
from marketplace.security import AuthPrincipal

MINIMUM_SUPPLIER_AGE = 18
DEFAULT_SUPPLIER_PROCESS = "Stampa3D"
DEFAULT_SUPPLIER_MATERIAL = "PLA"
DEFAULT_TARIFF_UNIT = "€/cm³"

TARIFF_TEXT_LIMITS = {"key": 60, "name": 120, "process": 20}
TARIFF_NUMERIC_FIELDS = ("marketPrice", "myPrice", "ratePerMin", "minQty")


def sanitize_tariff(entry: Any) -> dict[str, Any]:
    raw = entry if isinstance(entry, dict) else {}
    item: dict[str, Any] = {
        field: as_text(raw.get(field), max_length=limit) for field, limit in TARIFF_TEXT_LIMITS.items()
    }
    item["unit"] = as_text(raw.get("unit"), default=DEFAULT_TARIFF_UNIT)
    for field in TARIFF_NUMERIC_FIELDS:
        item[field] = as_non_negative_number(raw.get(field))
    return item


def _passwords_match(given: object, stored: object) -> bool:
    return hmac.compare_digest(str(given).encode("utf-8"), str(stored).encode("utf-8"))


class StoreSuppliersMixin:
    @staticmethod
    def _current_year() -> int:
        return datetime.now(UTC).year

    def register_supplier(
        self,
        *,
        email: str | None,
        password: str | None,
        confirm_password: str | None,
        first_name: str | None,
        last_name: str | None,
        birth_year: int | str | None,
    ) -> dict[str, Any]:
        if not all((email, password, confirm_password, first_name, last_name, birth_year)):
            raise ValidationError("missing field", code="REGISTER_MISSING_FIELD")
        if password != confirm_password:
            raise ValidationError("password mismatch", code="REGISTER_PASSWORD_MISMATCH")
        year_raw = str(birth_year).strip()
        if not re.fullmatch(r"\d{4}", year_raw):
            raise ValidationError("invalid year", code="REGISTER_INVALID_YEAR")
        year = int(year_raw)
        if self._current_year() - year < MINIMUM_SUPPLIER_AGE:
            raise ValidationError("underage", code="REGISTER_UNDERAGE")

        with self.documents.transaction() as doc:
            users = DocumentUsersRepository(doc["users"])
            if users.exists(email=email):
                raise ConflictError("email already registered", code="REGISTER_EMAIL_TAKEN")
            now = self._utcnow_iso()
            user_id = new_id("u")
            users.add(
                user={
                    "id": user_id,
                    "email": email,
                    "password": password,
                    "role": "supplier",
                    "firstName": first_name,
                    "lastName": last_name,
                    "birthYear": year,
                    "createdAt": now,
                }
            )
            DocumentSuppliersRepository(doc["suppliers"]).put(
                email=email,
                profile={
                    "userId": user_id,
                    "email": email,
                    "displayName": f"{first_name} {last_name}",
                    "firstName": first_name,
                    "lastName": last_name,
                    "company": "",
                    "processes": [DEFAULT_SUPPLIER_PROCESS],
                    "materials": [DEFAULT_SUPPLIER_MATERIAL],
                    "address": {},
                    "visible": True,
                    "createdAt": now,
                    "updatedAt": now,
                },
            )
        token = self._issue_token(AuthPrincipal(id=user_id, email=email, role="supplier"))
        return {"token": token}

    def signup(self, *, email: str | None, password: str | None, role: str | None = None) -> dict[str, Any]:
        if not email or not password:
            raise ValidationError("email and password are required", code="SIGNUP_MISSING_FIELD")
        user_role = role or "supplier"
        with self.documents.transaction() as doc:
            users = DocumentUsersRepository(doc["users"])
            if users.exists(email=email):
                raise ConflictError("user already registered", code="SIGNUP_EMAIL_TAKEN")
            user_id = new_id("u")
            users.add(
                user={
                    "id": user_id,
                    "email": email,
                    "password": password,
                    "role": user_role,
                    "createdAt": self._utcnow_iso(),
                }
            )
        return {"token": self._issue_token(AuthPrincipal(id=user_id, email=email, role=user_role))}

    def login(self, *, email: str | None, password: str | None) -> dict[str, Any]:
        if not email or not password:
            raise ValidationError("email and password are required", code="LOGIN_MISSING_FIELD")
        doc = self.documents.read()
        user = DocumentUsersRepository(doc["users"]).get_by_email(email=email)
        if user is None or not _passwords_match(password, user.get("password")):
            raise UnauthorizedError("invalid credentials", code="AUTH_INVALID_CREDENTIALS")
        principal = AuthPrincipal(
            id=str(user.get("id") or ""),
            email=str(user["email"]),
            role=str(user.get("role") or "supplier"),
        )
        return {"token": self._issue_token(principal)}

    def update_supplier_profile(self, *, email: str, profile: Any) -> dict[str, Any]:
        """Replace the whole profile of ``email``; only ``email`` and ``updatedAt`` are forced."""
        if profile is None:
            profile = {}
        if not isinstance(profile, dict):
            raise ValidationError("profile must be an object", code="PROFILE_INVALID")
        item = dict(profile)
        item["email"] = email
        item["updatedAt"] = self._utcnow_iso()
        item["visible"] = profile.get("visible") is not False
        with self.documents.transaction() as doc:
            return DocumentSuppliersRepository(doc["suppliers"]).put(email=email, profile=item)

    def get_supplier_profile(self, *, email: str) -> dict[str, Any] | None:
        return DocumentSuppliersRepository(self.documents.read()["suppliers"]).get(email=email)

    def set_tariffs(self, *, email: str, materials: Any) -> list[dict[str, Any]]:
        if not isinstance(materials, list):
            raise ValidationError("materials must be a list", code="TARIFFS_INVALID")
        cleaned = [sanitize_tariff(m) for m in materials]
        with self.documents.transaction() as doc:
            return DocumentTariffsRepository(doc["tariffs"]).replace(email=email, materials=cleaned)

    def get_tariffs(self, *, email: str) -> list[dict[str, Any]]:
        return DocumentTariffsRepository(self.documents.read()["tariffs"]).get(email=email)

    def list_public_suppliers(self) -> list[dict[str, Any]]:
        doc = self.documents.read()
        return list_visible_suppliers(doc["suppliers"], doc["tariffs"])
