"""Heuristic word lists used by normalization, expansion and scoring."""

from dataclasses import dataclass, field
from typing import Any, FrozenSet, Mapping, Optional, Tuple

from .exceptions import ConfigurationError
from .thesaurus import Thesaurus


DEFAULT_THESAURUS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("丢", ("补领", "挂失", "遗失")),
    ("不见了", ("补领", "挂失", "遗失")),
    ("坏了", ("换领", "损坏")),
    ("过期", ("换领", "有效期满")),
    ("搬家", ("迁移", "地址变更")),
    ("健康证", ("从业人员健康检查", "健康证明")),
    ("开公司", ("企业设立登记", "设立登记")),
    ("注册公司", ("企业设立登记", "设立登记")),
    ("生孩子", ("生育登记", "出生医学证明")),
    ("结婚", ("婚姻登记",)),
    ("离婚", ("婚姻登记",)),
    ("退休", ("退休审批", "养老金")),
    ("看病", ("医疗费用报销", "医保")),
    ("打疫苗", ("预防接种",)),
    ("公积金", ("住房公积金",)),
    ("lost", ("replacement", "reissue")),
)

DEFAULT_CORE_ENTITIES: Tuple[str, ...] = (
    "身份证",
    "社保卡",
    "护照",
    "港澳通行证",
    "驾驶证",
    "行驶证",
    "户口本",
    "居住证",
    "营业执照",
    "结婚证",
    "出生医学证明",
    "健康证",
    "identity card",
    "passport",
)

DEFAULT_FILLER_PHRASES: Tuple[str, ...] = (
    "我要办理",
    "我想办理",
    "怎么办理",
    "如何办理",
    "在哪里办",
    "去哪里办",
    "我要",
    "我想",
    "请问",
    "怎么办",
    "怎么",
    "如何",
    "哪里",
    "一下",
    "办理",
    "了",
    "吗",
    "呢",
    "i want to",
    "how to",
    "how do i",
    "please",
)

DEFAULT_ROLE_SYNONYMS: Tuple[FrozenSet[str], ...] = (
    frozenset({"自然人", "个人", "individual", "natural person"}),
    frozenset({"法人", "企业", "company", "legal entity"}),
)

DEFAULT_REGIONAL_MARKERS: Tuple[str, ...] = (
    "省",
    "全省",
    "中央",
    "国家",
    "provincial",
    "province",
    "central",
    "national",
)

DEFAULT_ANY_MARKERS: FrozenSet[str] = frozenset({"any", "all", "全部", "不限"})


def _longest_first(phrases) -> Tuple[str, ...]:
    cleaned = [phrase.strip() for phrase in phrases if phrase and phrase.strip()]
    # Stable sort keeps the configured order among equal lengths
    return tuple(sorted(dict.fromkeys(cleaned), key=len, reverse=True))


@dataclass(frozen=True)
class Lexicon:
    """
    Immutable heuristic tables injected into the ranking engine.

    Attributes:
        thesaurus: Colloquial fragment to official term mapping
        core_entities: Real-world object names that lock the candidate set
        filler_phrases: Intent verbs and particles stripped from queries
        role_synonyms: Groups of role names treated as equivalent
        regional_markers: Jurisdiction markers for province/central/national level
        any_markers: Values meaning "no preference" for role and locality
    """
    thesaurus: Thesaurus = field(default_factory=lambda: Thesaurus(DEFAULT_THESAURUS))
    core_entities: Tuple[str, ...] = DEFAULT_CORE_ENTITIES
    filler_phrases: Tuple[str, ...] = DEFAULT_FILLER_PHRASES
    role_synonyms: Tuple[FrozenSet[str], ...] = DEFAULT_ROLE_SYNONYMS
    regional_markers: Tuple[str, ...] = DEFAULT_REGIONAL_MARKERS
    any_markers: FrozenSet[str] = DEFAULT_ANY_MARKERS

    def __post_init__(self) -> None:
        if not isinstance(self.thesaurus, Thesaurus):
            raise ConfigurationError("Lexicon thesaurus must be a Thesaurus instance")
        object.__setattr__(self, "core_entities", tuple(
            entity.strip() for entity in self.core_entities if entity and entity.strip()
        ))
        object.__setattr__(self, "filler_phrases", _longest_first(self.filler_phrases))
        object.__setattr__(self, "role_synonyms", tuple(
            frozenset(name.casefold() for name in group) for group in self.role_synonyms
        ))
        object.__setattr__(self, "regional_markers", tuple(
            marker for marker in self.regional_markers if marker
        ))
        object.__setattr__(self, "any_markers", frozenset(
            marker.casefold() for marker in self.any_markers
        ))

    def is_any(self, value: Optional[str]) -> bool:
        """Whether a role or locality value means "no preference"."""
        return not value or value.strip().casefold() in self.any_markers

    def role_variants(self, role: str) -> FrozenSet[str]:
        """The role plus every synonym configured for it, case-folded."""
        folded = role.strip().casefold()
        variants = {folded}
        for group in self.role_synonyms:
            if folded in group:
                variants.update(group)
        return frozenset(variants)

    def is_regional(self, jurisdiction: Optional[str]) -> bool:
        """Whether a jurisdiction denotes a provincial, central or national level."""
        if not jurisdiction:
            return False
        folded = jurisdiction.casefold()
        return any(marker.casefold() in folded for marker in self.regional_markers)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Lexicon":
        """
        Build a lexicon from plain configuration data.

        Keys that are absent keep their defaults.

        Raises:
            ConfigurationError: If a key is unknown or a value is malformed
        """
        known = {
            "thesaurus", "core_entities", "filler_phrases",
            "role_synonyms", "regional_markers", "any_markers",
        }
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown lexicon keys: {sorted(unknown)}")

        kwargs: dict = {}
        if "thesaurus" in data:
            kwargs["thesaurus"] = Thesaurus(data["thesaurus"])
        for key in ("core_entities", "filler_phrases", "regional_markers"):
            if key in data:
                kwargs[key] = _as_tuple(key, data[key])
        if "role_synonyms" in data:
            kwargs["role_synonyms"] = tuple(
                frozenset(_as_tuple("role_synonyms", group)) for group in data["role_synonyms"]
            )
        if "any_markers" in data:
            kwargs["any_markers"] = frozenset(_as_tuple("any_markers", data["any_markers"]))
        return cls(**kwargs)


def _as_tuple(key: str, value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        raise ConfigurationError(f"Lexicon '{key}' must be a list of strings")
    try:
        return tuple(str(item) for item in value)
    except TypeError:
        raise ConfigurationError(f"Lexicon '{key}' must be a list of strings")


def default_lexicon() -> Lexicon:
    """Lexicon populated with the built-in government-service vocabulary."""
    return Lexicon()
