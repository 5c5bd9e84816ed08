# scripts/compare_fees_demo.py
import argparse, asyncio, logging

from oracle_fee_replay.app import build_cache, build_sink, compare, resolve_window
from oracle_fee_replay.config import load_config
from oracle_fee_replay.adapters.state_repo.memory_cache import MemoryObservationCache
from oracle_fee_replay.adapters.sinks.memory_sink import MemoryReportSink
from oracle_fee_replay.presenters.json_presenter import JsonPresenter, outcome_to_dict, summary_to_dict

def main():
    p = argparse.ArgumentParser(description="Replay pool swaps against oracle rounds: standard vs dynamic fee")
    p.add_argument("--days", type=float, default=None, help="Lookback window in days. Default=LOOKBACK_DAYS")
    p.add_argument("--start-ts", type=int, default=None, help="Window start (unix seconds); overrides --days")
    p.add_argument("--end-ts", type=int, default=None, help="Window end (unix seconds). Default=now")
    p.add_argument("--no-cache", action="store_true", help="Keep oracle rounds in memory only for this run")
    p.add_argument("--out-dir", default=None, help="Write the report JSON here instead of the configured sink")
    p.add_argument("--dry-run", action="store_true", help="Do not write the report anywhere, only print it")
    p.add_argument("--sample", type=int, default=3, help="How many sample rows to print from head/tail")
    args = p.parse_args()

    cfg = load_config()
    logging.basicConfig(level=cfg.log_level, format="%(asctime)s %(levelname)s %(message)s")

    window = resolve_window({"start_ts": args.start_ts, "end_ts": args.end_ts, "lookback_days": args.days}, cfg)
    print(f"[i] Comparing fees for window=[{window.start_s}, {window.end_s}]")

    report = asyncio.run(compare(cfg, window, MemoryObservationCache() if args.no_cache else build_cache(cfg)))
    sink = MemoryReportSink() if args.dry_run else build_sink(cfg, args.out_dir)
    location = sink.write(report)

    presenter = JsonPresenter()
    presenter.render({"report": location, **summary_to_dict(report)})

    rows = report.outcomes
    if rows:
        print("\n[i] First rows:")
        presenter.render([outcome_to_dict(x) for x in rows[:args.sample]])
        print("\n[i] Last rows:")
        presenter.render([outcome_to_dict(x) for x in rows[-args.sample:]])

if __name__ == "__main__":
    main()
