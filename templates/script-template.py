#!/usr/bin/env python3
"""Template: single-file script using the scriptext prelude.

Copy this file when starting a new script, then replace:
- the record model with the shape of your input rows
- the body of main() with the actual work

Run it with ``python script-template.py data.csv [--top]``. You might need to
``chmod +x`` it first.
"""

from __future__ import annotations

from scriptext.prelude import *  # noqa: F403


class Row(BaseModel):  # noqa: F405
    name: str
    value: int


@script  # noqa: F405
def main() -> None:
    argv = args()  # noqa: F405
    top = argv.has(lambda a: a == "--top")
    path = argv.req("input csv", Path)  # noqa: F405
    argv.finish()

    rows = read_as(path, CSV, Row)  # noqa: F405
    ensure(rows, f"no rows found in {path}")  # noqa: F405

    if top:
        rows = sorted(rows, key=lambda r: r.value, reverse=True)[:5]

    # random comes from the prelude
    pick = random.choice(rows)  # noqa: F405
    print_table(rows, title=f"{path.name} (random pick: {pick.name})")  # noqa: F405


if __name__ == "__main__":
    main()
