import unittest

from gitfluff.commit.evaluator import MAX_MESSAGE_LENGTH, Violation, evaluate, lint
from gitfluff.commit.message import parse
from gitfluff.rules.resolver import CliOverrides, resolve


def codes(verdict):
    return [violation.code for violation in verdict.violations]


class ScenarioTests(unittest.TestCase):
    def test_conventional_message_passes(self):
        verdict = lint("feat: add session caching", resolve("conventional"))
        self.assertEqual(verdict.violations, ())
        self.assertEqual(verdict.exit_code, 0)
        self.assertTrue(verdict.passed)
        self.assertFalse(verdict.rewritten)
        self.assertEqual(verdict.final_message, "feat: add session caching")

    def test_well_formed_conventional_messages_pass(self):
        config = resolve("conventional")
        messages = [
            "fix(parser): handle empty footers\n",
            "feat!: drop support for node 12\n\nBREAKING CHANGE: use node 14 or later\n",
            "docs: correct spelling of CHANGELOG\n\nSome body text.\n\nSecond paragraph.\n",
            "fix: prevent racing of requests\n\nIntroduce a request id.\n\nReviewed-by: Z\nRefs: #123\n",
            "chore(release): 1.2.0\n\n# Please enter the commit message for your changes.\n",
        ]
        for raw in messages:
            with self.subTest(raw=raw):
                verdict = lint(raw, config)
                self.assertEqual(verdict.violations, ())
                self.assertEqual(verdict.exit_code, 0)

    def test_wip_exclude(self):
        config = resolve(
            "conventional",
            cli_overrides=CliOverrides(excludes=(("(?i)wip", "WIP commits are not allowed"),)),
        )
        verdict = lint("wip: quick fix", config)
        self.assertEqual(len(verdict.violations), 1)
        self.assertEqual(verdict.violations[0].description, "WIP commits are not allowed")
        self.assertEqual(verdict.violations[0].line, 1)
        self.assertEqual(verdict.exit_code, 1)

    def test_no_ai_write_removes_banner_and_trailer(self):
        raw = (
            "feat: add x\n"
            "\n"
            "\U0001f916 Generated with Claude\n"
            "Co-Authored-By: Claude <noreply@anthropic.com>"
        )
        verdict = lint(raw, resolve("no-ai", cli_overrides=CliOverrides(write=True)))
        self.assertTrue(verdict.rewritten)
        self.assertEqual(verdict.final_message, "feat: add x\n")
        self.assertNotIn("Generated", verdict.final_message)
        self.assertNotIn("Co-Authored-By", verdict.final_message)
        self.assertEqual(verdict.violations, ())
        self.assertEqual(verdict.exit_code, 0)
        self.assertTrue(verdict.applied_cleanups)

    def test_custom_msg_pattern(self):
        config = resolve(
            "conventional",
            cli_overrides=CliOverrides(
                msg_pattern=r"^JIRA-[0-9]+: .+$",
                msg_pattern_description="Header must start with a JIRA key",
            ),
        )
        failing = lint("feat: add x", config)
        self.assertEqual(len(failing.violations), 1)
        self.assertEqual(failing.violations[0].description, "Header must start with a JIRA key")
        self.assertEqual(failing.exit_code, 1)

        passing = lint("JIRA-42: add x", config)
        self.assertEqual(passing.violations, ())
        self.assertEqual(passing.exit_code, 0)


class HeaderTests(unittest.TestCase):
    def test_empty_message_is_a_violation(self):
        for raw in ("", "  \n", "# only a comment\n"):
            with self.subTest(raw=raw):
                verdict = lint(raw, resolve())
                self.assertEqual(codes(verdict), ["header-empty"])
                self.assertEqual(verdict.exit_code, 1)

    def test_header_pattern_uses_configured_description(self):
        verdict = lint("Add things", resolve())
        self.assertEqual(codes(verdict), ["header-pattern"])
        self.assertIn("Conventional Commits", verdict.violations[0].description)
        self.assertEqual(str(verdict.violations[0]), verdict.violations[0].description + " (line 1)")

    def test_header_pattern_is_anchored_to_the_whole_line(self):
        config = resolve(cli_overrides=CliOverrides(msg_pattern="feat: .+"))
        self.assertEqual(lint("feat: ok", config).violations, ())
        self.assertEqual(codes(lint("not feat: ok", config)), ["header-pattern"])

    def test_hash_header_kept_without_comment_char(self):
        config = resolve(cli_overrides=CliOverrides(msg_pattern=r"#\d+ .+"))
        verdict = lint("#42 fix crash", config, comment_char=None)
        self.assertEqual(verdict.violations, ())
        self.assertEqual(verdict.exit_code, 0)
        self.assertEqual(codes(lint("#42 fix crash", config)), ["header-empty"])

    def test_rewrite_is_reparsed_with_the_same_comment_char(self):
        config = resolve(cli_overrides=CliOverrides(
            msg_pattern=r"#\d+ .+",
            write=True,
            cleanups=((" WIP$", "", "strip WIP marker"),),
        ))
        verdict = lint("#42 fix crash WIP", config, comment_char=None)
        self.assertTrue(verdict.rewritten)
        self.assertEqual(verdict.final_message, "#42 fix crash")
        self.assertEqual(verdict.violations, ())


class ExcludeTests(unittest.TestCase):
    def test_every_matching_exclude_is_reported(self):
        config = resolve(cli_overrides=CliOverrides(excludes=(
            ("(?i)wip", "no WIP"),
            ("fixup!", None),
            ("never-matches", None),
        )))
        verdict = lint("feat: wip\n\nfixup! later\n", config)
        self.assertEqual(codes(verdict), ["exclude", "exclude"])
        self.assertEqual(verdict.violations[0].description, "no WIP")
        self.assertEqual(verdict.violations[1].line, 3)
        self.assertIn("fixup!", verdict.violations[1].description)

    def test_excludes_check_the_original_message(self):
        config = resolve(
            "conventional",
            cli_overrides=CliOverrides(
                write=True,
                excludes=(("WIP", "no WIP"),),
                cleanups=(("WIP ", "", "strip WIP marker"),),
            ),
        )
        verdict = lint("feat: WIP add x", config)
        self.assertTrue(verdict.rewritten)
        self.assertEqual(verdict.final_message, "feat: add x")
        self.assertEqual(codes(verdict), ["exclude"])

    def test_excludes_skip_comment_lines(self):
        config = resolve(cli_overrides=CliOverrides(excludes=(("On branch", None),)))
        verdict = lint("feat: x\n\n# On branch main\n", config)
        self.assertEqual(verdict.violations, ())


class BodyPolicyTests(unittest.TestCase):
    def test_single_line(self):
        config = resolve("simple")
        self.assertEqual(lint("Fix login", config).violations, ())
        verdict = lint("Fix login\n\nMore detail\n", config)
        self.assertEqual(codes(verdict), ["single-line"])
        self.assertEqual(verdict.violations[0].line, 3)

    def test_single_line_counts_footers(self):
        config = resolve(cli_overrides=CliOverrides(single_line=True))
        self.assertEqual(codes(lint("feat: x\n\nRefs: #1\n", config)), ["single-line"])

    def test_require_body(self):
        config = resolve("conventional-body")
        self.assertEqual(codes(lint("feat: x", config)), ["require-body"])
        self.assertEqual(codes(lint("feat: x\n\nRefs: #1\n", config)), ["require-body"])
        self.assertEqual(lint("feat: x\n\nWhy this matters.\n", config).violations, ())


def affix_config(**overrides):
    return resolve("simple", cli_overrides=CliOverrides(msg_pattern=r"^.+$", **overrides))


class TitleAffixTests(unittest.TestCase):
    def test_literal_prefix_and_suffix(self):
        config = affix_config(title_prefix="[core]", title_suffix="(#12)")
        self.assertEqual(lint("[core] Fix login (#12)", config).violations, ())
        self.assertEqual(codes(lint("Fix login", config)), ["title-prefix", "title-suffix"])
        self.assertEqual(codes(lint("[Core] Fix login (#12)", config)), ["title-prefix"])

    def test_custom_separator(self):
        config = affix_config(title_prefix="PROJ", title_prefix_separator=": ")
        self.assertEqual(lint("PROJ: Fix login", config).violations, ())
        self.assertEqual(codes(lint("PROJ Fix login", config)), ["title-prefix"])

    def test_regex_prefix(self):
        config = affix_config(title_prefix="/[A-Z]+-[0-9]+/")
        self.assertEqual(lint("ABC-123 Fix login", config).violations, ())
        self.assertEqual(codes(lint("abc-123 Fix login", config)), ["title-prefix"])

    def test_regex_suffix(self):
        config = affix_config(title_suffix=r"/\(#[0-9]+\)/")
        self.assertEqual(lint("Fix login (#7)", config).violations, ())
        self.assertEqual(codes(lint("Fix login", config)), ["title-suffix"])


class HygieneTests(unittest.TestCase):
    def test_no_emojis_reports_first_position(self):
        config = resolve("simple", cli_overrides=CliOverrides(no_emojis=True))
        verdict = lint("Ship it \U0001f680", config)
        self.assertEqual(codes(verdict), ["no-emojis"])
        self.assertEqual((verdict.violations[0].line, verdict.violations[0].column), (1, 9))
        self.assertEqual(lint("Ship it", config).violations, ())

    def test_ascii_only(self):
        config = resolve(cli_overrides=CliOverrides(ascii_only=True))
        verdict = lint("feat: x\n\ncafé menu\n", config)
        self.assertEqual(codes(verdict), ["ascii-only"])
        self.assertEqual(verdict.violations[0].location, "line 3, column 4")

    def test_hygiene_runs_on_cleaned_message(self):
        config = resolve("no-ai", cli_overrides=CliOverrides(write=True, no_emojis=True))
        raw = "feat: add x\n\n\U0001f916 Generated with Claude Code\n"
        verdict = lint(raw, config)
        self.assertTrue(verdict.rewritten)
        self.assertEqual(verdict.violations, ())


class ConventionalLayoutTests(unittest.TestCase):
    def test_header_must_be_followed_by_blank_line(self):
        verdict = lint("feat: x\nbody straight away\n", resolve())
        self.assertEqual(codes(verdict), ["header-separator"])
        self.assertEqual(verdict.violations[0].line, 2)

    def test_breaking_change_token_case(self):
        verdict = lint("feat: x\n\nbreaking change: api removed\n", resolve())
        self.assertEqual(codes(verdict), ["breaking-change-token"])
        self.assertEqual(verdict.violations[0].line, 3)

        for token in ("BREAKING CHANGE", "BREAKING-CHANGE"):
            with self.subTest(token=token):
                self.assertEqual(lint(f"feat: x\n\n{token}: gone\n", resolve()).violations, ())

    def test_other_tokens_are_case_insensitive(self):
        self.assertEqual(lint("feat: x\n\nbody\n\nreviewed-BY: z\n", resolve()).violations, ())

    def test_footer_gap_must_be_one_blank_line(self):
        verdict = lint("feat: x\n\nbody\n\n\nRefs: #1\n", resolve())
        self.assertEqual(codes(verdict), ["footer-separator"])
        self.assertEqual(verdict.violations[0].line, 6)

    def test_checks_off_for_custom_pattern(self):
        config = resolve(cli_overrides=CliOverrides(msg_pattern="^.+$"))
        self.assertEqual(lint("anything\nbody\n\n\nbreaking change: x\n", config).violations, ())

    def test_checks_off_for_simple_preset(self):
        config = resolve("gitmoji")
        self.assertEqual(lint(":bug: fix\nbody right away\n", config).violations, ())


class RewriteAndExitCodeTests(unittest.TestCase):
    RAW = "feat: add x\n\n\U0001f916 Generated with Claude Code\n"

    def test_pending_cleanups_without_write(self):
        verdict = lint(self.RAW, resolve("no-ai"))
        self.assertFalse(verdict.rewritten)
        self.assertEqual(verdict.final_message, self.RAW)
        self.assertEqual(verdict.applied_cleanups, ())
        self.assertTrue(verdict.pending_cleanups)
        self.assertEqual(verdict.exit_code, 0)

    def test_rewrite_exit_code_monotonicity(self):
        lenient = resolve("no-ai", cli_overrides=CliOverrides(write=True))
        strict = resolve("no-ai", cli_overrides=CliOverrides(write=True, exit_nonzero_on_rewrite=True))

        lenient_verdict = lint(self.RAW, lenient)
        strict_verdict = lint(self.RAW, strict)

        self.assertTrue(lenient_verdict.rewritten)
        self.assertEqual(lenient_verdict.violations, ())
        self.assertEqual(lenient_verdict.exit_code, 0)

        self.assertTrue(strict_verdict.rewritten)
        self.assertEqual(strict_verdict.violations, ())
        self.assertEqual(strict_verdict.exit_code, 1)

    def test_exit_nonzero_on_rewrite_without_rewrite(self):
        config = resolve("no-ai", cli_overrides=CliOverrides(write=True, exit_nonzero_on_rewrite=True))
        self.assertEqual(lint("feat: clean\n", config).exit_code, 0)

    def test_rewrite_keeps_footers(self):
        raw = (
            "feat: add x\n"
            "\n"
            "Body.\n"
            "\n"
            "Refs: #1\n"
            "Co-Authored-By: Claude <noreply@anthropic.com>\n"
        )
        verdict = lint(raw, resolve("no-ai", cli_overrides=CliOverrides(write=True)))
        self.assertEqual([footer.token for footer in verdict.message.footers], ["Refs"])
        self.assertEqual(len(parse(raw).footers), 2)


class DeterminismTests(unittest.TestCase):
    def test_same_input_same_verdict(self):
        config = resolve("no-ai", cli_overrides=CliOverrides(
            write=True,
            excludes=(("(?i)wip", "no WIP"),),
            no_emojis=True,
        ))
        raw = "wip: thing ✨\n\nbody\n\n\U0001f916 Generated with Claude\n"
        message = parse(raw)
        first = evaluate(message, raw, config)
        second = evaluate(message, raw, config)
        self.assertEqual(first, second)
        self.assertEqual(first.to_dict(), second.to_dict())


class LimitTests(unittest.TestCase):
    def test_oversized_message_is_rejected_before_regexes(self):
        raw = "feat: x\n\n" + "a" * MAX_MESSAGE_LENGTH
        verdict = lint(raw, resolve())
        self.assertEqual(codes(verdict), ["message-too-large"])
        self.assertEqual(verdict.exit_code, 1)

    def test_violation_to_dict(self):
        violation = Violation("exclude", "no WIP", line=2)
        self.assertEqual(
            violation.to_dict(),
            {"code": "exclude", "description": "no WIP", "line": 2, "column": None},
        )


if __name__ == "__main__":
    unittest.main()
