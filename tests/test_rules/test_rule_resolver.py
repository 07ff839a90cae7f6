"""规则解析器单元测试."""

import pytest

from elasticmaint.rules import (
    PrefixMatchStrategy,
    Rule,
    RuleFormatError,
    RuleResolver,
    is_ignored,
    resolve,
)

RULES = {
    "info": "1, 2, 3, 4",
    "info-prod": "5, 6, -, 8",
    "nginx": "3, 7, 14, 30",
    "broken": "1, 2, 3",
}


class TestResolve:
    """resolve 测试."""

    @pytest.mark.parametrize("index", [".kibana", ".monitoring-es-2020-01-01", "."])
    def test_system_index_ignored(self, index: str) -> None:
        """测试以 . 开头的索引总是被忽略."""
        resolution = resolve(index, [], {".": "1,1,1,1", ".kibana": "1,1,1,1"})
        assert resolution.ignored
        assert resolution.prefix is None

    def test_ignore_substring(self) -> None:
        """测试命中忽略子串."""
        resolution = resolve("nginx-test-2020-01-01", ["-test-"], RULES)
        assert resolution.ignored

    @pytest.mark.parametrize(
        "index",
        ["nginx-2020-01-01", "info-2020-01-01", "unknown-2020-01-01", "x", ""],
    )
    def test_not_ignored(self, index: str) -> None:
        """测试非系统索引且未命中忽略子串时不会被忽略."""
        resolution = resolve(index, ["-test-", "tmp"], {"nginx": "1,2,3,4"})
        assert not resolution.ignored

    def test_longest_prefix_wins(self) -> None:
        """测试最长前缀优先."""
        resolution = resolve("info-prod-2020-01-01", [], RULES)
        assert resolution.prefix == "info-prod"
        assert resolution.rule == Rule(warm=5, move=6, cold=0, delete=8)

    def test_shorter_prefix(self) -> None:
        resolution = resolve("info-dev-2020-01-01", [], RULES)
        assert resolution.prefix == "info"
        assert resolution.rule == Rule(warm=1, move=2, cold=3, delete=4)

    def test_longest_prefix_independent_of_order(self) -> None:
        """测试结果与规则表顺序无关."""
        rules = {"info-prod": "5,6,7,8", "info": "1,2,3,4"}
        assert resolve("info-prod-2020-01-01", [], rules).prefix == "info-prod"

    def test_no_match_returns_empty_rule(self) -> None:
        """测试未匹配任何前缀时返回全 0 规则."""
        resolution = resolve("apache-2020-01-01", [], RULES)
        assert not resolution.ignored
        assert resolution.prefix is None
        assert resolution.rule == Rule()

    def test_broken_rule_raises(self) -> None:
        """测试命中的规则格式错误."""
        with pytest.raises(RuleFormatError, match="broken"):
            resolve("broken-2020-01-01", [], RULES)

    def test_broken_rule_not_matched(self) -> None:
        """测试未命中的错误规则不影响解析."""
        assert resolve("nginx-2020-01-01", [], RULES).rule.delete == 30

    def test_ignore_checked_before_rules(self) -> None:
        """测试忽略优先于规则格式校验."""
        assert resolve("broken-2020-01-01", ["broken"], RULES).ignored

    @pytest.mark.parametrize(
        "index",
        ["info-prod-2020-01-01", "info-2020-01-01", "nginx-2020-01-01", "apache"],
    )
    def test_strategies_agree(self, index: str) -> None:
        """测试两种匹配策略对同一索引结果一致."""
        longest = resolve(index, [], RULES, PrefixMatchStrategy.LONGEST)
        legacy = resolve(index, [], RULES, PrefixMatchStrategy.REVERSE_LEXICOGRAPHIC)
        assert longest == legacy


class TestIsIgnored:
    """is_ignored 测试."""

    def test_is_ignored(self) -> None:
        assert is_ignored(".security", [])
        assert is_ignored("a-tmp-b", ["tmp"])
        assert not is_ignored("a-b", ["tmp"])


class TestRuleResolver:
    """RuleResolver 测试."""

    def test_resolve(self) -> None:
        resolver = RuleResolver(["-test-"], RULES)
        assert resolver.resolve("nginx-2020-01-01").rule.delete == 30
        assert resolver.resolve("nginx-test-2020-01-01").ignored

    def test_copies_inputs(self) -> None:
        """测试解析器不受外部修改影响."""
        rules = {"nginx": "1,2,3,4"}
        ignores = ["tmp"]
        resolver = RuleResolver(ignores, rules)
        rules["nginx"] = "bad"
        ignores.append("nginx")
        assert resolver.resolve("nginx-2020-01-01").rule == Rule(1, 2, 3, 4)

    def test_strategy(self) -> None:
        resolver = RuleResolver([], RULES, PrefixMatchStrategy.REVERSE_LEXICOGRAPHIC)
        assert resolver.resolve("info-prod-2020-01-01").prefix == "info-prod"
