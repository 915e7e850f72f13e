"""Report configuration dataclass, frozen and slotted for immutability."""

from dataclasses import dataclass

# Greek letters and calculus symbols escaped to LaTeX commands.
SYMBOLS: tuple[str, ...] = (
    "alpha", "beta", "gamma", "delta", "epsilon", "zeta", "eta", "theta",
    "iota", "kappa", "lambda", "mu", "nu", "xi", "omicron", "pi", "rho",
    "sigma", "tau", "upsilon", "phi", "chi", "psi", "omega", "Delta",
    "Gamma", "Theta", "Lambda", "Xi", "Pi", "Sigma", "Phi", "Psi", "Omega",
    "nabla", "partial", "infinity",
)


@dataclass(frozen=True, slots=True)
class ReportConfig:
    """Rendering and scanning conventions for one report run.

    All fields are frozen and typed. Validation runs in __post_init__ to
    reject unusable conventions early.
    """

    symbols: tuple[str, ...] = SYMBOLS
    table_directive: str = "table"  # keyword in "# table: [...]" comments
    true_value_marker: str = ".true_value"
    auto_scale_marker: str = ".auto_{scale}()"  # as it looks after formatting
    unit_constructors: tuple[str, ...] = ("Unit(", "Unit (")
    unit_type: str = "Unit"
    title: str = ""
    include_unplaced: bool = True
    vars_suffix: str = "_vars.json"
    report_suffix: str = "_report.md"

    def __post_init__(self) -> None:
        if not self.table_directive.strip():
            raise ValueError("table_directive must be a non-empty keyword")
        if not self.table_directive.replace("_", "").replace("-", "").isalnum():
            raise ValueError(
                f"table_directive must be a plain word, got {self.table_directive!r}"
            )
        for sym in self.symbols:
            if not sym or not sym.isidentifier():
                raise ValueError(f"symbol names must be identifiers, got {sym!r}")
        if self.vars_suffix == self.report_suffix:
            raise ValueError(
                f"vars_suffix and report_suffix must differ, both are {self.vars_suffix!r}"
            )
