"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, List, Dict, Callable
from dataclasses import dataclass, field

from .ir import FileResult, IRSymbol


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the documentation pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as the run progresses.

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, output,
          formatter, ignore, append, debug
        - env_check: inputSourceFile, docOutputFile, envOK
        - source_process: fileResult
        - ir_filter: filteredIR
        - doc_generate: docContents
        - debug_dump: debugFiles
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Root directory of the sources; IR paths are relative to it
        outputdir: Directory receiving the document and debug dumps
        verbosity: Logging verbosity level (1-3)
        inputFile: Entry point (relative to inputdir)
        output: Document filename (relative to outputdir)
        formatter: Optional custom formatter file (relative to inputdir)
        ignore: Optional regular expression of symbol names to drop
        append: Token name to merge into an existing document
        debug: Write IR, token and AST dumps next to the document
        envOK: Environment validation passed
        inputSourceFile: Resolved path to the entry point
        docOutputFile: Resolved path of the document to write
        fileResult: Processing result of the entry point
        filteredIR: IR after the ignore filter
        docContents: Final document text
        debugFiles: Paths of the written debug dumps
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    output: Optional[str] = field(default=None)
    formatter: Optional[str] = field(default=None)
    ignore: Optional[str] = field(default=None)
    append: Optional[str] = field(default=None)
    debug: bool = field(default=False)

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    docOutputFile: Path = field(default=Path("/"))
    fileResult: Optional[FileResult] = field(default=None)
    filteredIR: Optional[List[IRSymbol]] = field(default=None)
    docContents: Optional[str] = field(default=None)
    debugFiles: Dict[str, Path] = field(default_factory=dict)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments (inputFile, output, append, etc.)
            inputdir: Directory containing source files
            outputdir: Directory for generated output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        # Only keep options that are ProgramState fields
        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}
        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            source_process,
            doc_generate,
        )

    This is equivalent to:
        doc_generate(source_process(env_check(initial_state)))
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
