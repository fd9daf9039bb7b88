import os
import sys
import logging
import argparse
import matplotlib
matplotlib.use('Agg')

from hoops import config
from hoops import parse
from hoops import analyze
from hoops import plot

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(description='Teammate eFG% with each player on vs off the court.')
    parser.add_argument('--csv', type=str, required=True, help='Play-by-play CSV for one game')
    parser.add_argument('--home', type=str, default=None, help='Home team abbreviation')
    parser.add_argument('--away', type=str, default=None, help='Away team abbreviation')
    parser.add_argument('--out-dir', type=str, default=None, help='Output directory (default: analysis/<csv name>)')
    parser.add_argument('--min-sample', type=int, default=config.MIN_SAMPLE,
                        help='Hide players from the charts whose smaller sample is below this')
    parser.add_argument('--no-plot', action='store_true', help='Only write the CSV tables')
    return parser


def run_analysis(csv_path, home=None, away=None, out_dir=None, min_sample=0, make_plots=True):
    """Load a game, compute both sides and write tables (and charts).

    Returns {side: results_frame}.
    """
    csv_path = config.resolve_data_path(csv_path)
    df = parse.load_pbp(csv_path)

    if home is None and away is None:
        sides = parse.infer_sides(df)
        logger.info(f"Inferred sides: home={sides['home']} away={sides['away']}")
    elif home is None or away is None:
        raise ValueError("Give both --home and --away, or neither")
    else:
        sides = {'home': home.strip().upper(), 'away': away.strip().upper()}

    if out_dir is None:
        out_dir = config.get_analysis_dir(os.path.splitext(os.path.basename(csv_path))[0])
    os.makedirs(out_dir, exist_ok=True)

    results = analyze.analyze_game(df, sides)

    frames = {}
    for side, team in sides.items():
        side_results = results[side]
        frame = analyze.results_to_frame(side_results)
        frames[side] = frame

        csv_out = os.path.join(out_dir, f'{team}_on_off_efg.csv')
        frame.to_csv(csv_out)
        logger.info(f"Wrote {len(frame)} players to {csv_out}")

        s = analyze.summarize(side_results)
        logger.info(f"{team} ({side}): {s['with_ratio']}/{s['players']} players with a ratio, "
                    f"{s['with_missing']} with missing values, best={s['best']} worst={s['worst']}")

        if make_plots:
            plot.plot_ratio_bars(frame, team, out_path=os.path.join(out_dir, f'{team}_on_off_ratio.png'),
                                 min_sample=min_sample)

    if make_plots:
        plot.plot_credibility_curve(out_path=os.path.join(out_dir, 'credibility_curve.png'))

    return frames


def main(argv=None):
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(message)s')
    args = build_parser().parse_args(argv)

    try:
        run_analysis(args.csv, home=args.home, away=args.away, out_dir=args.out_dir,
                     min_sample=args.min_sample, make_plots=not args.no_plot)
    except (analyze.InvalidSideError, ValueError, FileNotFoundError) as e:
        logger.error(f"On/off analysis failed: {e}")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
