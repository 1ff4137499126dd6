"""Detection settings model."""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Brute-force window sizes; they bound the number of seek/read pairs a
# scanner performs on one stream.
DEFAULT_PSP_SCAN_LIMIT = 100000
DEFAULT_ASCII_SCAN_LIMIT = 10000
DEFAULT_MAX_TOKEN_LEN = 255

# Publisher/region prefixes of PSP UMD and PSN serials
PSP_SERIAL_PREFIXES = (
    "ULES-", "ULUS-", "ULJS-",
    "ULEM-", "ULUM-", "ULJM-",
    "UCES-", "UCUS-", "UCJS-", "UCAS-",
    "NPEH-", "NPUH-", "NPJH-",
    "NPEG-", "NPUG-", "NPJG-", "NPHG-",
    "NPEZ-", "NPUZ-", "NPJZ-",
)


class DetectionSettings(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    psp_scan_limit: int = Field(default=DEFAULT_PSP_SCAN_LIMIT, ge=0)
    ascii_scan_limit: int = Field(default=DEFAULT_ASCII_SCAN_LIMIT, ge=0)
    max_token_len: int = Field(default=DEFAULT_MAX_TOKEN_LEN, ge=1, le=4096)
    extra_psp_prefixes: List[str] = Field(default_factory=list)

    @field_validator("extra_psp_prefixes")
    @classmethod
    def _check_prefixes(cls, value: List[str]) -> List[str]:
        for prefix in value:
            if len(prefix) != 5 or not prefix.endswith("-") or not prefix.isascii():
                raise ValueError(f"PSP prefix must look like 'ULES-', got {prefix!r}")
        return [prefix.upper() for prefix in value]

    def psp_prefixes(self) -> Tuple[str, ...]:
        """Built-in PSP prefixes followed by configured extras, deduplicated."""
        merged = list(PSP_SERIAL_PREFIXES)
        for prefix in self.extra_psp_prefixes:
            if prefix not in merged:
                merged.append(prefix)
        return tuple(merged)


def validate_settings(payload: Dict[str, Any]) -> DetectionSettings:
    return DetectionSettings.model_validate(payload or {})
