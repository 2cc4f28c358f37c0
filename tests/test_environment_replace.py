from __future__ import annotations

from buildmatrix.core.stages import EnvironmentReplace

PROD = EnvironmentReplace("production")
DEV = EnvironmentReplace("development")


def test_replaces_conditional_token():
    src = 'if (process.env.NODE_ENV !== "production") { warn() }'
    assert PROD.apply(src) == 'if ("production" !== "production") { warn() }'


def test_development_mode_value():
    assert DEV.apply("const mode = process.env.NODE_ENV;") == 'const mode = "development";'


def test_replaces_every_occurrence():
    src = "a(process.env.NODE_ENV); b(process.env.NODE_ENV)"
    assert PROD.apply(src) == 'a("production"); b("production")'


def test_string_literals_are_untouched():
    src = (
        "log('process.env.NODE_ENV'); "
        'log("process.env.NODE_ENV"); '
        "log(`process.env.NODE_ENV`); "
        "check(process.env.NODE_ENV)"
    )
    out = PROD.apply(src)
    assert "log('process.env.NODE_ENV')" in out
    assert 'log("process.env.NODE_ENV")' in out
    assert "log(`process.env.NODE_ENV`)" in out
    assert out.endswith('check("production")')


def test_escaped_quote_does_not_end_string():
    src = r'say("it\"s process.env.NODE_ENV"); x = process.env.NODE_ENV === 1'
    out = PROD.apply(src)
    assert r'say("it\"s process.env.NODE_ENV")' in out
    assert out.endswith('x = "production" === 1')


def test_comments_are_untouched():
    src = "// process.env.NODE_ENV\n/* process.env.NODE_ENV */\nf(process.env.NODE_ENV)"
    assert PROD.apply(src) == '// process.env.NODE_ENV\n/* process.env.NODE_ENV */\nf("production")'


def test_longer_identifiers_not_rewritten():
    src = "a(process.env.NODE_ENV_EXTRA); b(my.process.env.NODE_ENV); c(process.env.NODE_ENVIRONMENT)"
    assert PROD.apply(src) == src


def test_assignment_target_preserved():
    src = "process.env.NODE_ENV = 'test'; if (process.env.NODE_ENV == 'x') {}"
    out = PROD.apply(src)
    assert out.startswith("process.env.NODE_ENV = 'test';")
    assert "if (\"production\" == 'x')" in out


def test_assignment_rewritten_when_not_prevented():
    loose = EnvironmentReplace("production", prevent_assignment=False)
    assert loose.apply("process.env.NODE_ENV = 1") == '"production" = 1'


def test_source_without_token_is_identity():
    src = "export const x = 1 // nothing to see\n"
    assert PROD.apply(src) == src


def test_template_interpolation_is_code():
    assert PROD.apply("const m = `mode=${process.env.NODE_ENV}`") == 'const m = `mode=${"production"}`'


def test_template_interpolation_with_nested_braces():
    src = "`${ {k: process.env.NODE_ENV}.k } and ${f('}')} process.env.NODE_ENV`"
    assert PROD.apply(src) == "`${ {k: \"production\"}.k } and ${f('}')} process.env.NODE_ENV`"


def test_template_nested_in_interpolation():
    src = "`a ${`b ${process.env.NODE_ENV}`} c`"
    assert DEV.apply(src) == '`a ${`b ${"development"}`} c`'


def test_spread_operand_is_rewritten():
    assert PROD.apply("f(...process.env.NODE_ENV)") == 'f(..."production")'


def test_member_chain_and_optional_chain_untouched():
    src = "a.process.env.NODE_ENV; a?.process.env.NODE_ENV"
    assert PROD.apply(src) == src


def test_assignment_target_preserved_across_comment():
    src = "process.env.NODE_ENV /* x */ = 'test'"
    assert PROD.apply(src) == src
    src = "process.env.NODE_ENV // why\n= 'test'"
    assert PROD.apply(src) == src


def test_comparison_across_comment_is_rewritten():
    assert PROD.apply("process.env.NODE_ENV /* x */ === 1") == '"production" /* x */ === 1'
