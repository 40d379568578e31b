"""
Lead Loader for LeadMaps.

Loads maps-extracted business records from CSV, JSON or an extraction API.
Column names may be Portuguese (nome, categoria, bairro, ...) or English.
"""

import csv
import hashlib
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import httpx
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from lead_scoring.models import RawLead

logger = logging.getLogger(__name__)


def _alias(*names: str) -> AliasChoices:
    return AliasChoices(*names)


class LeadRecord(BaseModel):
    """One extracted business as it arrives from a file or the API."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = None
    name: str = Field(validation_alias=_alias("name", "nome"))
    category: str = Field(validation_alias=_alias("category", "categoria"))
    address: str = Field(default="", validation_alias=_alias("address", "endereco", "endereço"))
    neighborhood: Optional[str] = Field(default=None, validation_alias=_alias("neighborhood", "bairro"))
    city: str = Field(validation_alias=_alias("city", "cidade"))
    state: str = Field(default="", validation_alias=_alias("state", "estado", "uf"))
    phone: Optional[str] = Field(default=None, validation_alias=_alias("phone", "telefone"))
    whatsapp: Optional[str] = None
    instagram: Optional[str] = None
    website: Optional[str] = Field(default=None, validation_alias=_alias("website", "site"))
    rating: Optional[float] = Field(default=None, ge=0, le=5, validation_alias=_alias("rating", "nota"))
    reviews: Optional[int] = Field(default=None, ge=0, validation_alias=_alias("reviews", "avaliacoes", "avaliações"))
    keyword: str = Field(default="", validation_alias=_alias("keyword", "palavrachave", "palavra_chave"))
    extracted_at: str = Field(default="", validation_alias=_alias("extracted_at", "extractedat"))
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @model_validator(mode="before")
    @classmethod
    def normalize_keys(cls, data: Any) -> Any:
        """Lowercase keys and turn blank strings into missing values."""
        if not isinstance(data, dict):
            return data

        normalized = {}
        for key, value in data.items():
            key = str(key).strip().lower().replace(" ", "_")
            if isinstance(value, str):
                value = value.strip()
                if not value:
                    continue
            normalized[key] = value
        return normalized

    @field_validator("rating", "latitude", "longitude", mode="before")
    @classmethod
    def parse_decimal(cls, value: Any) -> Any:
        # "4,7" is how Brazilian exports write decimals
        if isinstance(value, str):
            return value.replace(",", ".")
        return value

    @field_validator("reviews", mode="before")
    @classmethod
    def parse_count(cls, value: Any) -> Any:
        if isinstance(value, str):
            digits = re.sub(r"[^\d]", "", value)
            return int(digits) if digits else None
        return value

    @field_validator("id", "whatsapp", "instagram", "phone", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)):
            return str(value)
        return value

    def generate_id(self) -> str:
        key = f"{self.name}|{self.address}|{self.city}".lower()
        return hashlib.md5(key.encode("utf-8")).hexdigest()[:12]

    def to_raw_lead(self) -> RawLead:
        return RawLead(
            id=self.id or self.generate_id(),
            name=self.name,
            category=self.category,
            address=self.address,
            neighborhood=self.neighborhood,
            city=self.city,
            state=self.state,
            phone=self.phone,
            whatsapp=self.whatsapp,
            instagram=self.instagram,
            website=self.website,
            rating=self.rating,
            reviews=self.reviews,
            keyword=self.keyword,
            extracted_at=self.extracted_at,
            latitude=self.latitude,
            longitude=self.longitude,
        )


class LeadLoader:
    """
    Loads extracted leads into RawLead objects.

    Supports:
    - CSV files (comma or semicolon separated)
    - JSON files (array, or object with a "leads" key)
    - REST endpoints returning the same JSON shapes
    """

    COLLECTION_KEYS = ("leads", "data", "items", "results")

    def parse_records(self, records: Iterable[Dict[str, Any]], source: str = "input") -> List[RawLead]:
        """Validate records, skipping the ones that cannot be read."""
        leads = []
        for index, record in enumerate(records):
            try:
                leads.append(LeadRecord.model_validate(record).to_raw_lead())
            except ValidationError as e:
                logger.warning(f"Skipping record {index} from {source}: {e.error_count()} invalid field(s)")
                continue

        logger.info(f"Loaded {len(leads)} leads from {source}")
        return leads

    def _unwrap(self, data: Any) -> List[Dict[str, Any]]:
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            for key in self.COLLECTION_KEYS:
                if key in data:
                    return data[key]
            return [data]
        return []

    def load_from_csv(self, file_path: Union[str, Path]) -> List[RawLead]:
        """
        Load leads from a CSV file.

        Args:
            file_path: Path to the CSV file

        Returns:
            List of RawLead objects
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"CSV file not found: {file_path}")

        with open(file_path, "r", encoding="utf-8-sig", newline="") as f:
            sample = f.read(4096)
            f.seek(0)
            delimiter = ";" if sample.count(";") > sample.count(",") else ","
            rows = list(csv.DictReader(f, delimiter=delimiter))

        return self.parse_records(rows, source=str(file_path))

    def load_from_json(self, file_path: Union[str, Path]) -> List[RawLead]:
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"JSON file not found: {file_path}")

        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return self.parse_records(self._unwrap(data), source=str(file_path))

    def load_from_file(self, file_path: Union[str, Path]) -> List[RawLead]:
        """Dispatch on the file suffix."""
        suffix = Path(file_path).suffix.lower()
        if suffix == ".csv":
            return self.load_from_csv(file_path)
        if suffix == ".json":
            return self.load_from_json(file_path)
        raise ValueError(f"Unsupported format: {suffix}")

    async def load_from_api(
        self,
        api_url: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None
    ) -> List[RawLead]:
        """
        Load leads from an extraction API.

        Args:
            api_url: URL returning extracted leads as JSON
            headers: Optional HTTP headers
            params: Optional query parameters

        Returns:
            List of RawLead objects
        """
        async with httpx.AsyncClient() as client:
            response = await client.get(api_url, headers=headers, params=params)
            response.raise_for_status()
            data = response.json()

        return self.parse_records(self._unwrap(data), source=api_url)
