from .affine import IDENTITY, Affine2D, lerp
from .colors import DEFAULT_COLOR, RGBA, fade_alpha, format_color, is_valid_color, parse_color
from .commands import (
    COMMAND_TYPES,
    Command,
    FillArc,
    FillRect,
    FillTriangle,
    GenericAffine,
    InvalidCommand,
    Restore,
    Rotate,
    Save,
    Scale,
    SetFillColor,
    SetStrokeColor,
    Shear,
    StrokeArc,
    StrokeRect,
    StrokeTriangle,
    Translate,
    command_args,
)
from .compiler import CompiledStep, CompiledTimeline, StackWarning, StepEffect, compile_commands, compile_program
from .config import DEFAULT_CONFIG, ToyConfig, load_config, validate_config
from .errors import CommandValidationError, InvalidModeError, ProgramValidationError, UnrecognizedCommandError
from .evaluator import BACKWARD, FORWARD, effective_param, render
from .frame_rate_controller import FrameRateController, run_playback
from .program_io import Program, find_program, load_program, load_program_list, program_from_dict, save_program
from .scheduler import Animating, Easing, Idle, PlaybackScheduler
from .text_syntax import format_program_text, parse_command_line, parse_program_text
from .trace import Trace, TraceLine
from .validation import (
    DecodedProgram,
    ValidationReport,
    decode_command,
    decode_command_list,
    encode_command,
    encode_command_list,
    has_stack_commands,
)

__all__ = [
    "Affine2D",
    "Animating",
    "BACKWARD",
    "COMMAND_TYPES",
    "Command",
    "CommandValidationError",
    "CompiledStep",
    "CompiledTimeline",
    "DEFAULT_COLOR",
    "DEFAULT_CONFIG",
    "DecodedProgram",
    "Easing",
    "FORWARD",
    "FillArc",
    "FillRect",
    "FillTriangle",
    "FrameRateController",
    "GenericAffine",
    "IDENTITY",
    "Idle",
    "InvalidCommand",
    "InvalidModeError",
    "PlaybackScheduler",
    "Program",
    "ProgramValidationError",
    "RGBA",
    "Restore",
    "Rotate",
    "Save",
    "Scale",
    "SetFillColor",
    "SetStrokeColor",
    "Shear",
    "StackWarning",
    "StepEffect",
    "StrokeArc",
    "StrokeRect",
    "StrokeTriangle",
    "ToyConfig",
    "Trace",
    "TraceLine",
    "Translate",
    "UnrecognizedCommandError",
    "ValidationReport",
    "command_args",
    "compile_commands",
    "compile_program",
    "decode_command",
    "decode_command_list",
    "effective_param",
    "encode_command",
    "encode_command_list",
    "fade_alpha",
    "find_program",
    "format_color",
    "format_program_text",
    "has_stack_commands",
    "is_valid_color",
    "lerp",
    "load_config",
    "load_program",
    "load_program_list",
    "parse_color",
    "parse_command_line",
    "parse_program_text",
    "program_from_dict",
    "render",
    "run_playback",
    "save_program",
    "validate_config",
]
