# totp_engine/otp_model.py
# Items du coffre qui portent un secret TOTP, et lecture/écriture des URI otpauth://

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
from urllib.parse import parse_qsl, quote, unquote, urlencode, urlparse

from totp_engine import base32_codec, config
from totp_engine.errors import InvalidParameters, InvalidSecret


class ItemKind(Enum):
    LOGIN = "login"
    OTP = "otp"

    @property
    def allows_overrides(self) -> bool:
        # Seuls les items OTP peuvent changer digits/period/algorithme
        return self is ItemKind.OTP


def normalize_algorithm(name: str) -> str:
    algorithm = name.upper().replace("-", "")
    if algorithm not in config.SUPPORTED_ALGORITHMS:
        raise InvalidParameters(f"Unsupported algorithm: {name}")
    return algorithm


@dataclass(frozen=True)
class TimeStepConfig:
    digits: int = config.DEFAULT_DIGITS
    period: int = config.DEFAULT_PERIOD
    algorithm: str = config.DEFAULT_ALGORITHM

    def __post_init__(self):
        low, high = config.ITEM_DIGITS_RANGE
        if isinstance(self.digits, bool) or not isinstance(self.digits, int) or not low <= self.digits <= high:
            raise InvalidParameters(f"Digits must be between {low} and {high}, got {self.digits!r}")
        if isinstance(self.period, bool) or not isinstance(self.period, int) or self.period <= 0:
            raise InvalidParameters(f"Period must be a positive integer, got {self.period!r}")
        object.__setattr__(self, "algorithm", normalize_algorithm(self.algorithm))

    @property
    def is_default(self) -> bool:
        return self == TimeStepConfig()


@dataclass
class VaultItem:
    name: str
    secret: str
    kind: ItemKind = ItemKind.OTP
    issuer: str = ""
    account: str = ""
    config: TimeStepConfig = field(default_factory=TimeStepConfig)
    password: Optional[str] = None

    def __post_init__(self):
        if not base32_codec.decode(self.secret):
            raise InvalidSecret(f"Item '{self.name}' has no usable secret")
        if not self.kind.allows_overrides and not self.config.is_default:
            raise InvalidParameters(f"{self.kind.value} items use the default digits and period")

    @property
    def label(self) -> str:
        return f"{self.issuer}:{self.account}" if self.issuer else (self.account or self.name)

    def display_parameters(self) -> str:
        parts = [_("Type: {type_name}").format(type_name=self.kind.value.upper())]
        if self.account:
            parts.append(_("Account : {account}").format(account=self.account))
        if self.issuer:
            parts.append(_("Issuer: {issuer}").format(issuer=self.issuer))
        parts.append(_("Code length: {digits}").format(digits=self.config.digits))
        parts.append(_("Timestep: {period} seconds").format(period=self.config.period))
        parts.append(_("Algorithm: {algo}").format(algo=self.config.algorithm))
        return "\n".join(parts)


def _parse_int(params: dict, key: str, default: int) -> int:
    value = params.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise InvalidParameters(f"Invalid {key}: {value!r}") from None


def parse_otpauth(uri: str, kind: ItemKind = ItemKind.OTP) -> VaultItem:
    """
    Lit une URI de la forme :
    otpauth://totp/Issuer:account?secret=JBSWY3DPEHPK3PXP&issuer=Issuer&digits=6&period=30

    Le paramètre `issuer` l'emporte sur celui du label. Seul le type totp est accepté.
    """
    parsed = urlparse(uri.strip())
    if parsed.scheme != "otpauth":
        raise InvalidParameters("Not an otpauth:// URI")
    if parsed.netloc.lower() != "totp":
        raise InvalidParameters(f"Unsupported OTP type: {parsed.netloc}")

    label = unquote(parsed.path.lstrip("/"))
    if ":" in label:
        label_issuer, account = label.split(":", 1)
    else:
        label_issuer, account = "", label
    account = account.strip()

    params = dict(parse_qsl(parsed.query))
    secret = params.get("secret", "")
    if not secret:
        raise InvalidSecret("otpauth URI has no secret")
    issuer = params.get("issuer", label_issuer).strip()

    time_config = TimeStepConfig(
        digits=_parse_int(params, "digits", config.DEFAULT_DIGITS),
        period=_parse_int(params, "period", config.DEFAULT_PERIOD),
        algorithm=params.get("algorithm", config.DEFAULT_ALGORITHM),
    )
    return VaultItem(
        name=issuer or account,
        secret=secret,
        kind=kind,
        issuer=issuer,
        account=account,
        config=time_config,
    )


def format_otpauth(item: VaultItem) -> str:
    if item.issuer:
        label = f"{quote(item.issuer)}:{quote(item.account)}"
    else:
        label = quote(item.account or item.name)
    params = {"secret": base32_codec.clean(item.secret)}
    if item.issuer:
        params["issuer"] = item.issuer
    # Paramètres par défaut omis
    if item.config.algorithm != config.DEFAULT_ALGORITHM:
        params["algorithm"] = item.config.algorithm
    if item.config.digits != config.DEFAULT_DIGITS:
        params["digits"] = str(item.config.digits)
    if item.config.period != config.DEFAULT_PERIOD:
        params["period"] = str(item.config.period)
    return f"otpauth://totp/{label}?{urlencode(params, quote_via=quote)}"
