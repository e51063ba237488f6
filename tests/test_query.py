"""Test thesaurus, lexicon, policy, query normalization and term expansion."""

import pytest

from service_ranking.core.exceptions import ConfigurationError
from service_ranking.core.expander import TermExpander
from service_ranking.core.lexicon import Lexicon
from service_ranking.core.normalizer import QueryNormalizer
from service_ranking.core.policy import ScoringPolicy
from service_ranking.core.thesaurus import Thesaurus
from service_ranking.models.result import ExpandedTerm, Provenance


class TestThesaurus:
    """Test Thesaurus configuration and lookup."""

    def test_lookup_in_definition_order(self):
        """Test that terms come back in definition order across triggers."""
        thesaurus = Thesaurus([("丢", ["补领", "挂失"]), ("坏", ["换领"])])

        assert thesaurus.lookup("证件坏了又丢了") == ["补领", "挂失", "换领"]

    def test_lookup_scans_every_text(self):
        """Test that a trigger in any of the texts counts."""
        thesaurus = Thesaurus({"我要": ["申请"]})

        assert thesaurus.lookup("补证", "我要补证") == ["申请"]
        assert thesaurus.lookup("补证") == []

    def test_mapping_access(self):
        """Test container protocol."""
        thesaurus = Thesaurus({"丢": ["补领"]})

        assert "丢" in thesaurus
        assert thesaurus["丢"] == ("补领",)
        assert len(thesaurus) == 1
        with pytest.raises(KeyError):
            thesaurus["坏"]

    def test_duplicate_trigger_rejected(self):
        """Test that duplicate triggers are a configuration error."""
        with pytest.raises(ConfigurationError, match="Duplicate"):
            Thesaurus([("丢", ["补领"]), ("丢", ["挂失"])])

    def test_string_terms_rejected(self):
        """Test that a bare string is not accepted as a term list."""
        with pytest.raises(ConfigurationError, match="must be a list"):
            Thesaurus({"丢": "补领"})

    def test_empty_terms_rejected(self):
        """Test that a trigger must map to at least one term."""
        with pytest.raises(ConfigurationError, match="maps to no terms"):
            Thesaurus({"丢": ["", " "]})


class TestLexicon:
    """Test Lexicon configuration."""

    def test_filler_phrases_longest_first(self):
        """Test filler phrases are ordered longest first."""
        lexicon = Lexicon(filler_phrases=("我要", "我要办理", "了"))
        assert lexicon.filler_phrases == ("我要办理", "我要", "了")

    def test_role_variants_include_synonyms(self, lexicon):
        """Test individual and company synonym groups."""
        assert "natural person" in lexicon.role_variants("individual")
        assert "法人" in lexicon.role_variants("企业")
        assert lexicon.role_variants("公务员") == frozenset({"公务员"})

    def test_regional_markers(self, lexicon):
        """Test detection of provincial and central jurisdictions."""
        assert lexicon.is_regional("湖南省人力资源和社会保障厅")
        assert lexicon.is_regional("National Immigration Administration")
        assert not lexicon.is_regional("长沙市公安局")
        assert not lexicon.is_regional("")

    def test_any_markers(self, lexicon):
        """Test values meaning no preference."""
        assert lexicon.is_any("any")
        assert lexicon.is_any("全部")
        assert lexicon.is_any("")
        assert not lexicon.is_any("法人")

    def test_from_mapping(self):
        """Test building a lexicon from configuration data."""
        lexicon = Lexicon.from_mapping({
            "thesaurus": {"丢": ["补领"]},
            "core_entities": ["护照"],
        })

        assert lexicon.thesaurus.lookup("护照丢了") == ["补领"]
        assert lexicon.core_entities == ("护照",)

    def test_from_mapping_unknown_key(self):
        """Test that unknown keys are rejected."""
        with pytest.raises(ConfigurationError, match="Unknown lexicon keys"):
            Lexicon.from_mapping({"synonyms": {}})

    def test_from_mapping_string_list_rejected(self):
        """Test that a bare string is not accepted as a list."""
        with pytest.raises(ConfigurationError, match="list of strings"):
            Lexicon.from_mapping({"core_entities": "护照"})


class TestScoringPolicy:
    """Test ScoringPolicy configuration."""

    def test_from_mapping_overrides(self):
        """Test overriding selected weights."""
        policy = ScoringPolicy.from_mapping({"thesaurus_bonus": 800, "role_penalty": 300})

        assert policy.thesaurus_bonus == 800
        assert policy.role_penalty == 300
        assert policy.lexical_hit == ScoringPolicy().lexical_hit

    def test_negative_weight_rejected(self):
        """Test that weights must be non-negative."""
        with pytest.raises(ConfigurationError, match="Invalid scoring policy"):
            ScoringPolicy.from_mapping({"role_penalty": -1})

    def test_default_cutoff_is_small(self):
        """Test the default cutoff drops only near-zero totals."""
        policy = ScoringPolicy()

        assert 0 < policy.cutoff_threshold < policy.semantic_multiplier * 0.1

    def test_requiring_evidence(self):
        """Test the stricter cutoff sits above what context signals alone can reach."""
        policy = ScoringPolicy().requiring_evidence()

        assert policy.context_only_ceiling() == 325
        assert policy.cutoff_threshold == 350
        assert policy.role_penalty == ScoringPolicy().role_penalty

    def test_unknown_key_rejected(self):
        """Test that unknown keys are rejected."""
        with pytest.raises(ConfigurationError, match="Unknown scoring policy keys"):
            ScoringPolicy.from_mapping({"semantic_weight": 1})


class TestQueryNormalizer:
    """Test QueryNormalizer."""

    @pytest.fixture
    def normalizer(self, lexicon):
        return QueryNormalizer(lexicon)

    def test_strips_fillers_and_locks_entity(self, normalizer):
        """Test the lost identity card query."""
        normalized = normalizer.normalize("身份证丢了")

        assert normalized.raw == "身份证丢了"
        assert normalized.cleaned == "身份证丢"
        assert normalized.locked_entity == "身份证"

    def test_longer_filler_removed_first(self, normalizer):
        """Test that "我要办理" is removed as a whole."""
        normalized = normalizer.normalize("我要办理健康证")

        assert normalized.cleaned == "健康证"
        assert normalized.locked_entity == "健康证"

    def test_english_fillers_case_insensitive(self, normalizer):
        """Test case-insensitive literal removal."""
        normalized = normalizer.normalize("How to renew my Passport please")

        assert normalized.cleaned == "renew my Passport"
        assert normalized.locked_entity == "passport"

    def test_filler_inside_chinese_query(self, normalizer):
        """Test a filler between words is deleted without leaving a gap."""
        normalized = normalizer.normalize("身份证如何补领")

        assert normalized.cleaned == "身份证补领"
        assert normalized.locked_entity == "身份证"

    def test_falls_back_to_raw_when_stripped_empty(self, normalizer):
        """Test that a query made only of fillers is kept as typed."""
        normalized = normalizer.normalize(" 我要办理 ")

        assert normalized.cleaned == "我要办理"
        assert not normalized.is_empty

    def test_blank_query_is_empty(self, normalizer):
        """Test that whitespace yields an empty query and no entity."""
        normalized = normalizer.normalize("   ")

        assert normalized.cleaned == ""
        assert normalized.locked_entity is None
        assert normalized.is_empty

    def test_none_query_is_empty(self, normalizer):
        """Test that None never raises."""
        assert normalizer.normalize(None).is_empty

    def test_longest_entity_wins(self):
        """Test the longest contained core entity is locked."""
        normalizer = QueryNormalizer(Lexicon(core_entities=("身份证", "临时身份证")))
        assert normalizer.normalize("临时身份证丢了").locked_entity == "临时身份证"

    def test_no_entity(self, normalizer):
        """Test a query without core entities."""
        assert normalizer.normalize("退休").locked_entity is None


class TestTermExpander:
    """Test TermExpander."""

    @pytest.fixture
    def expander(self, lexicon):
        return TermExpander(lexicon.thesaurus)

    def test_thesaurus_expansion(self, expander):
        """Test that every mapped term is added with thesaurus provenance."""
        terms = expander.expand("身份证丢", "身份证丢了")

        assert terms == [
            ExpandedTerm("身份证丢了", Provenance.VERBATIM),
            ExpandedTerm("身份证丢", Provenance.VERBATIM),
            ExpandedTerm("补领", Provenance.THESAURUS),
            ExpandedTerm("挂失", Provenance.THESAURUS),
            ExpandedTerm("遗失", Provenance.THESAURUS),
        ]

    def test_identical_query_forms_collapse(self, expander):
        """Test raw and cleaned queries that are equal appear once."""
        terms = expander.expand("退休", "退休")

        assert [t.term for t in terms].count("退休") == 1
        assert terms[0].provenance == Provenance.VERBATIM

    def test_external_terms_appended(self, expander):
        """Test model-sourced terms come last with external provenance."""
        terms = expander.expand("身份证丢", "身份证丢了", external_terms=["补领", "证件补办", " "])

        assert terms[-1] == ExpandedTerm("证件补办", Provenance.EXTERNAL)
        # First provenance seen wins
        assert ExpandedTerm("补领", Provenance.THESAURUS) in terms
        assert ExpandedTerm("补领", Provenance.EXTERNAL) not in terms
        assert len(terms) == 6

    def test_overlapping_triggers_deduplicated(self):
        """Test a term mapped by two triggers appears once, at its first position."""
        expander = TermExpander(Thesaurus([("丢", ["补领", "挂失"]), ("不见", ["挂失", "遗失"])]))

        terms = expander.expand("证件丢了不见", "证件丢了不见")
        assert [t.term for t in terms] == ["证件丢了不见", "补领", "挂失", "遗失"]
