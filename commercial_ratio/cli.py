import json
import sys

from .dashboard.state import DashboardState
from .projection.scenario import ScenarioInput, clamp_ratio, parse_mode

USAGE = "Usage: python -m commercial_ratio.cli <target_ratio> [revenue|cost]"


def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if not args or len(args) > 2:
        print(USAGE)
        return 2
    try:
        ratio = clamp_ratio(float(args[0]))
        mode = parse_mode(args[1] if len(args) > 1 else "revenue")
    except ValueError as e:
        print(f"{USAGE}\n{e}")
        return 2
    state = DashboardState.create(scenario=ScenarioInput(target_ratio=ratio, mode=mode))
    print(json.dumps(state.summary(), indent=2))
    if state.error is not None:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
