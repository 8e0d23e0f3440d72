import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Config:
    source: str
    output: str = "out"
    asm_path: str = "out.asm"
    dump_tokens: bool = False
    dump_ast: bool = False
    link: bool = True
    verbose: bool = False

    @property
    def obj_path(self):
        return os.path.splitext(self.asm_path)[0] + ".o"

    @classmethod
    def from_args(cls, args):
        return cls(
            source=args.source,
            output=args.output,
            asm_path=args.asm,
            dump_tokens=args.dump_tokens,
            dump_ast=args.dump_ast,
            link=not args.no_link,
            verbose=args.verbose,
        )
