import re

from jsminer.rules import Match, RegexRule, Rule, register_rule, registered_rules


def test_regex_rule_reports_every_hit():
    rule = RegexRule(name="ipv4", regex=re.compile(r"\b(?:\d{1,3}\.){3}\d{1,3}\b"), severity="info")
    found = rule.find("a 1.2.3.4 b 5.6.7.8")
    assert [m.value for m in found] == ["1.2.3.4", "5.6.7.8"]
    assert all(m.pattern == "ipv4" for m in found)
    assert all(m.severity == "info" for m in found)
    assert all(m.source == "" for m in found)


def test_regex_rule_accepts_bytes():
    rule = RegexRule(name="jwt", regex=re.compile(r"eyJ[a-zA-Z0-9_-]+?\.[a-zA-Z0-9_-]+\.[a-zA-Z0-9_-]+"))
    found = rule.find(b"const t='eyJabc.def.ghi';")
    assert found == [Match(pattern="jwt", value="eyJabc.def.ghi", severity="info")]


def test_regex_rule_without_hits_returns_empty_list():
    rule = RegexRule(name="phone", regex=re.compile(r"\d{3}-\d{3}-\d{4}"))
    assert rule.find("nothing to see") == []


def test_match_name_is_rule_name():
    rule = RegexRule(name="custom", regex=re.compile("x"))
    assert rule.match_name() == "custom"


def test_regex_rule_used_through_rule_protocol():
    rule: Rule = RegexRule(name="custom", regex=re.compile("x"))
    assert isinstance(rule, Rule)
    found = rule.find("axbx")
    assert [(m.pattern, m.value) for m in found] == [("custom", "x"), ("custom", "x")]


def test_register_rule_appends_to_registry():
    rule = RegexRule(name="registered_probe", regex=re.compile("probe"))
    before = registered_rules()
    register_rule(rule)
    after = registered_rules()
    assert len(after) == len(before) + 1
    assert after[-1] is rule


def test_registered_rules_returns_a_copy():
    before_names = [r.match_name() for r in registered_rules()]
    snapshot = registered_rules()
    snapshot.append(RegexRule(name="not_registered", regex=re.compile("z")))
    after_names = [r.match_name() for r in registered_rules()]
    assert after_names == before_names
    assert "not_registered" not in after_names