import argparse
import logging
import os
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path

from tqdm import tqdm

from config import DotDict, default_config, find_config_path, get_config_value, load_config, search_limits, search_policy
from klondike import new_table
from session import SolveRecord
from solver import SearchLimits, SearchPolicy, SearchStatus, solve

logger = logging.getLogger(__name__)

# deals known to have a solution
WINNABLE_SEEDS = [
    322, 331, 341, 1004, 1006, 1013, 1016, 1018, 1021, 1023, 1026, 1032, 1038, 1040, 1041, 1042,
    1044, 1055, 1056, 1058, 1061, 1064, 1079, 1082, 1088, 1093, 1095, 1104, 1113, 1118, 1119, 1120,
    1125, 1132, 1138, 1145, 1146, 1165, 1172, 1176, 1177, 1178, 1180, 1181, 1191, 1193, 1195, 1203,
    1207, 1208, 1211, 1215, 1219, 1222, 1225, 1227, 1229, 1231, 1239, 1240, 1244, 1245, 1247, 1248,
    1249, 1252, 1256, 1265, 1272, 1273, 1274, 1275, 1277, 1278, 1291, 1293, 1295, 1306, 1307, 1308,
    1312, 1318, 1320, 1329, 1330, 1336, 1341, 1354, 1357, 1360, 1362, 1366, 1367, 1369, 1373, 1378,
    1379, 1380, 1382, 1385, 1386, 1397, 1409, 1415, 1418, 1428, 1434, 1435, 1441, 1447, 1448, 1451,
    1455, 1458, 1460, 1463, 1466, 1476, 1477, 1478, 1481, 1497, 1499, 1512, 1515, 1518, 1520, 1527,
    1532, 1536, 1541, 1542, 1545, 1556, 1557, 1561, 1562, 1573, 1581, 1585, 1592, 1599, 1600, 1602,
    1616, 1621, 1622, 1623, 1624, 1625, 1627, 1628, 1631, 1632, 1639, 1642, 1653, 1657, 1659, 1660,
    1668, 1678, 1679, 1682, 1683, 1684, 1694, 1712, 1714, 1731, 1748, 1750, 1753, 1754, 1758, 1762,
    1764, 1777, 1778, 1791, 1808, 1812, 1813, 1816, 1825, 1846, 1851, 1860, 1864, 1866, 1867, 1869,
    1872, 1876, 1882, 1884, 1886, 1889, 1891, 1893, 1896, 1901, 1902, 1904, 1906, 1916, 1920, 1921,
    1922, 1927, 1929, 1934, 1935, 1943, 1944, 1946, 1954, 1955, 1956, 1959, 1968, 1972, 1978, 1987,
    1990, 1993,
]  # fmt: skip


def solve_seed_worker(args: tuple[int, SearchLimits, SearchPolicy]) -> SolveRecord:
    """
    Worker function for parallel execution of searches.

    Args:
        args: Tuple containing (seed, limits, policy)

    Returns:
        The record of the search for that seed
    """
    seed, limits, policy = args
    result = solve(new_table(seed), limits, policy)
    return SolveRecord.from_result(seed, result)


def solve_one(seed: int, limits: SearchLimits, policy: SearchPolicy, *, show: bool, output: Path | None) -> bool:
    table = new_table(seed)
    if show:
        logger.info("seed %d deal:\n%s", seed, table)

    start_time = time.time()
    result = solve(table, limits, policy)
    duration = time.time() - start_time

    logger.info(
        "seed %d: %s after %d iterations in %.2fs (max depth %d, %d positions)",
        seed,
        result.status.value,
        result.iterations,
        duration,
        result.max_depth,
        result.visited_states,
    )
    for step, play in enumerate(result.plays, start=1):
        logger.info("%4d. %s", step, play)

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(SolveRecord.from_result(seed, result).as_json(), encoding="utf-8")
        logger.info("record written to %s", output)
    return result.won


def solve_many(seeds: list[int], limits: SearchLimits, policy: SearchPolicy, num_processes: int = 0) -> list[int]:
    """
    Solves many deals in parallel and reports statistics.

    Args:
        seeds: Deals to search
        limits: Per-deal search limits
        policy: Search policy shared by every deal
        num_processes: Number of processes to use (0 = auto)

    Returns:
        The seeds that were won
    """
    if num_processes <= 0:
        num_processes = min(os.cpu_count() or 4, len(seeds))
    else:
        num_processes = min(num_processes, len(seeds))
    num_processes = max(num_processes, 1)

    logger.info("searching %d deals using %d processes", len(seeds), num_processes)
    start_time = time.time()

    records: list[SolveRecord] = []
    with ProcessPoolExecutor(max_workers=num_processes) as executor:
        futures = {executor.submit(solve_seed_worker, (seed, limits, policy)): seed for seed in seeds}
        for future in tqdm(as_completed(futures), total=len(futures), unit="deal"):
            seed = futures[future]
            try:
                records.append(future.result())
            except Exception:
                logger.exception("search for seed %d failed", seed)
    records.sort(key=lambda record: record.seed)

    duration = time.time() - start_time
    won = [record.seed for record in records if record.status == SearchStatus.WON.value]
    capped = sum(1 for record in records if record.status == SearchStatus.ITERATION_CAP.value)
    exhausted = sum(1 for record in records if record.status == SearchStatus.EXHAUSTED.value)

    logger.info("won %d/%d deals (%.2f%%)", len(won), len(seeds), 100.0 * len(won) / max(len(seeds), 1))
    logger.info("exhausted %d, hit the iteration cap %d", exhausted, capped)
    logger.info("time taken: %.2f seconds (%.2f seconds per deal)", duration, duration / max(len(seeds), 1))
    if won:
        logger.info("winning seeds: %s", ", ".join(str(seed) for seed in won))
    return won


def read_config(path: str | None) -> DotDict:
    if path is not None:
        return load_config(path)
    found = find_config_path()
    if found is None:
        return default_config()
    return load_config(found)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Search Klondike deals for a winning sequence of plays")
    parser.add_argument("--seed", type=int, default=None, help="Solve a single deal")
    parser.add_argument("--start-seed", type=int, default=None, help="First seed of a batch (default: from config)")
    parser.add_argument("--count", type=int, default=None, help="Number of seeds in a batch (default: from config)")
    parser.add_argument("--known", action="store_true", help="Search the known winnable seeds")
    parser.add_argument("--max-iterations", type=int, default=None, help="Search iterations per deal")
    parser.add_argument("--prune-revisited", action="store_true", help="Skip positions already reached")
    parser.add_argument("--partial-runs", action="store_true", help="Allow lifting part of a tableau run")
    parser.add_argument("--processes", type=int, default=None, help="Number of processes (0 = auto)")
    parser.add_argument("--output", type=Path, default=None, help="Write the single-deal record as JSON")
    parser.add_argument("--show", action="store_true", help="Log the initial deal")
    parser.add_argument("--config", type=str, default=None, help="YAML configuration file")
    parser.add_argument("--verbose", action="store_true", help="Log every search step")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI application."""
    args = parse_args(argv)
    config = read_config(args.config)

    level = "DEBUG" if args.verbose else str(get_config_value(config, "logging.level", "INFO")).upper()
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    limits = search_limits(config)
    if args.max_iterations is not None:
        limits = SearchLimits(max_iterations=args.max_iterations)
    policy = search_policy(config)
    policy = SearchPolicy(
        prune_revisited=policy.prune_revisited or args.prune_revisited,
        partial_runs=policy.partial_runs or args.partial_runs,
    )

    if args.seed is not None:
        return 0 if solve_one(args.seed, limits, policy, show=args.show, output=args.output) else 1

    if args.known:
        seeds = WINNABLE_SEEDS
    else:
        start_seed = args.start_seed if args.start_seed is not None else get_config_value(config, "batch.start_seed", 1)
        count = args.count if args.count is not None else get_config_value(config, "batch.count", 100)
        seeds = list(range(int(start_seed), int(start_seed) + int(count)))
    processes = args.processes if args.processes is not None else get_config_value(config, "batch.processes", 0)

    won = solve_many(seeds, limits, policy, num_processes=int(processes))
    return 0 if won else 1


if __name__ == "__main__":
    raise SystemExit(main())
