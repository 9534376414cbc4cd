from shrs.alias import Alias, AliasInfo, AliasRuleCtx


def ctx(name):
    return AliasRuleCtx(alias_name=name, sh=None, ctx=None, rt=None)


def test_from_pairs_lookup():
    alias = Alias.from_pairs([("l", "ls"), ("c", "cd"), ("g", "git"), ("v", "vim"), ("la", "ls -a")])
    assert alias.get(ctx("la")) == ["ls -a"]
    assert alias.get(ctx("g")) == ["git"]


def test_unknown_name_gives_empty():
    assert Alias().get(ctx("nope")) == []


def test_several_definitions_kept_in_order():
    alias = Alias()
    alias.set("x", AliasInfo.always("first"))
    alias.set("x", AliasInfo.always("second"))
    assert alias.get(ctx("x")) == ["first", "second"]


def test_rules_filter_definitions():
    alias = Alias()
    alias.set("inhome", AliasInfo.with_rule("true", lambda c: c.rt == "home"))
    alias.set("inhome", AliasInfo.with_rule("false", lambda c: c.rt != "home"))
    home = AliasRuleCtx("inhome", None, None, "home")
    away = AliasRuleCtx("inhome", None, None, "elsewhere")
    assert alias.get(home) == ["true"]
    assert alias.get(away) == ["false"]


def test_rule_sees_alias_name():
    seen = []
    alias = Alias()
    alias.set("k", AliasInfo.with_rule("v", lambda c: seen.append(c.alias_name) or True))
    assert alias.get(ctx("k")) == ["v"]
    assert seen == ["k"]


def test_unset_removes_all_definitions():
    alias = Alias.from_pairs([("a", "1"), ("a", "2"), ("b", "3")])
    alias.unset("a")
    alias.unset("missing")
    assert alias.get(ctx("a")) == []
    assert alias.get(ctx("b")) == ["3"]


def test_clear_removes_everything():
    alias = Alias.from_pairs([("a", "1"), ("b", "2")])
    alias.clear()
    assert alias.get(ctx("a")) == [] and alias.get(ctx("b")) == []


def test_always_converts_to_string():
    assert AliasInfo.always(5).subst == "5"