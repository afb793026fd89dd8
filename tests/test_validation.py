from __future__ import annotations

import unittest

from transformtoy_core.core.commands import (
    FillArc,
    FillRect,
    GenericAffine,
    InvalidCommand,
    Restore,
    Rotate,
    Save,
    SetFillColor,
    Shear,
    StrokeTriangle,
    Translate,
)
from transformtoy_core.core.errors import CommandValidationError, ProgramValidationError, UnrecognizedCommandError
from transformtoy_core.core.validation import (
    decode_command,
    decode_command_list,
    encode_command,
    encode_command_list,
    has_stack_commands,
)


class DecodeCommandTests(unittest.TestCase):
    def test_decodes_each_kind(self) -> None:
        self.assertEqual(decode_command(["translate", 10, 20]), Translate(10, 20))
        self.assertEqual(decode_command(("rotate", 45.5)), Rotate(45.5))
        self.assertEqual(decode_command(["shear", 0.5, 0]), Shear(0.5, 0))
        self.assertEqual(decode_command(["transform", 1, 0, 0, 1, 5, 6]), GenericAffine(1, 0, 0, 1, 5, 6))
        self.assertEqual(decode_command(["save"]), Save())
        self.assertEqual(decode_command(["restore"]), Restore())
        self.assertEqual(decode_command(["fillStyle", "red"]), SetFillColor("red"))
        self.assertEqual(decode_command(["fillRect", 0, 0, 10, 10, "blue"]), FillRect(0, 0, 10, 10, "blue"))
        self.assertEqual(
            decode_command(["strokeTriangle", 0, 0, 1, 0, 0, 1]),
            StrokeTriangle(0, 0, 1, 0, 0, 1),
        )
        self.assertEqual(
            decode_command(["fillArc", 0, 0, 5, 0, 180, True, "#0f0"]),
            FillArc(0, 0, 5, 0, 180, True, "#0f0"),
        )

    def test_unknown_command_is_distinct_error(self) -> None:
        with self.assertRaises(UnrecognizedCommandError) as ctx:
            decode_command(["skew", 1, 2], index=3)
        self.assertEqual(ctx.exception.index, 3)
        self.assertEqual(ctx.exception.field, "command")
        self.assertTrue(str(ctx.exception).startswith("command 3: "))

    def test_empty_instruction_rejected(self) -> None:
        for raw in ([], "translate", [None, 1], [""]):
            with self.subTest(raw=raw):
                with self.assertRaises(CommandValidationError) as ctx:
                    decode_command(raw)
                self.assertNotIsInstance(ctx.exception, UnrecognizedCommandError)
                self.assertEqual(ctx.exception.field, "command")

    def test_non_numeric_argument_localized(self) -> None:
        with self.assertRaises(CommandValidationError) as ctx:
            decode_command(["translate", 10, "20"], index=1)
        err = ctx.exception
        self.assertEqual(err.index, 1)
        self.assertEqual(err.command, "translate")
        self.assertEqual(err.field, "ty")
        self.assertEqual(err.expected, "finite number")
        self.assertEqual(err.received, "20")

    def test_bool_and_non_finite_numbers_rejected(self) -> None:
        for raw in (["rotate", True], ["rotate", float("nan")], ["scale", 1, float("inf")]):
            with self.subTest(raw=raw):
                with self.assertRaises(CommandValidationError):
                    decode_command(raw)

    def test_arity_errors(self) -> None:
        with self.assertRaises(CommandValidationError) as missing:
            decode_command(["scale", 2])
        self.assertEqual(missing.exception.field, "sy")
        self.assertIsNone(missing.exception.received)
        with self.assertRaises(CommandValidationError):
            decode_command(["save", 1])
        with self.assertRaises(CommandValidationError):
            decode_command(["fillRect", 0, 0, 1, 1, "red", "extra"])

    def test_invalid_color_rejected(self) -> None:
        with self.assertRaises(CommandValidationError) as ctx:
            decode_command(["fillStyle", "not-a-color"])
        self.assertEqual(ctx.exception.field, "color")
        with self.assertRaises(CommandValidationError):
            decode_command(["fillRect", 0, 0, 1, 1, 7])

    def test_arc_ccw_must_be_bool(self) -> None:
        with self.assertRaises(CommandValidationError) as ctx:
            decode_command(["strokeArc", 0, 0, 5, 0, 90, 1])
        self.assertEqual(ctx.exception.field, "ccw")
        self.assertEqual(decode_command(["strokeArc", 0, 0, 5, 0, 90, None, "red"]).color, "red")


class DecodeCommandListTests(unittest.TestCase):
    def test_skip_policy_keeps_slot_as_invalid(self) -> None:
        raws = [["translate", 1, 2], ["bogus"], ["rotate", "x"], ["save"]]
        with self.assertLogs("transformtoy_core.core.validation", level="WARNING") as logs:
            decoded = decode_command_list(raws)
        self.assertEqual(len(decoded.commands), 4)
        self.assertIsInstance(decoded.commands[1], InvalidCommand)
        self.assertIsInstance(decoded.commands[2], InvalidCommand)
        self.assertEqual(decoded.commands[1].raw, ("bogus",))
        self.assertFalse(decoded.report.ok)
        self.assertEqual([err.index for err in decoded.report.errors], [1, 2])
        self.assertEqual(len(logs.output), 2)
        self.assertIn("skipping instruction 1", logs.output[0])

    def test_strict_policy_raises_with_every_error(self) -> None:
        with self.assertRaises(ProgramValidationError) as ctx:
            decode_command_list([["bogus"], ["translate", 1, 2], ["scale"]], policy="strict")
        self.assertEqual([err.index for err in ctx.exception.errors], [0, 2])

    def test_unknown_policy_rejected(self) -> None:
        with self.assertRaises(ValueError):
            decode_command_list([], policy="lenient")  # type: ignore[arg-type]

    def test_wire_round_trip(self) -> None:
        raws = [
            ["translate", 10, 0],
            ["rotate", 90],
            ["scale", 2, 2],
            ["transform", 1, 0.5, 0, 1, 0, 0],
            ["save"],
            ["fillStyle", "#ff000080"],
            ["fillRect", 0, 0, 10, 10],
            ["strokeRect", 0, 0, 10, 10, "blue"],
            ["fillArc", 0, 0, 5, 0, 270, True],
            ["restore"],
        ]
        decoded = decode_command_list(raws, policy="strict")
        encoded = encode_command_list(decoded.commands)
        self.assertEqual(encoded, raws)
        self.assertEqual(decode_command_list(encoded, policy="strict").commands, decoded.commands)

    def test_invalid_command_encodes_to_raw(self) -> None:
        self.assertEqual(encode_command(InvalidCommand(raw=("bogus", 1), reason="x")), ("bogus", 1))

    def test_stack_pre_scan(self) -> None:
        self.assertTrue(has_stack_commands([["translate", 1, 1], ["restore"]]))
        self.assertFalse(has_stack_commands([["translate", 1, 1], "save"]))


if __name__ == "__main__":
    unittest.main()
