import io
import os
import sys
import matplotlib.pyplot as plt
from argparse import ArgumentParser
from tabulated.function import InterpolatedFunction, DEFAULT_N_POINTS
from tabulated.reader import read_two_column_data

DEFAULT_INPUT_FILE = 'Xpol_src_ls_flux-wl.dat'
OUTPUT_PREFIX = 'reint-'
N_JOBS = 5


def output_path_for(input_file, suffix=''):
    directory, name = os.path.split(input_file)
    return os.path.join(directory, OUTPUT_PREFIX + name + suffix)


def write_table(path, xs, ys):
    with open(path, 'w') as f:
        for x, y in zip(xs, ys):
            f.write(f"{x} {y}\n")


def plot_reinterpolation(input_file, xs, ys):
    x_samples, y_samples = read_two_column_data(input_file)

    fig, ax = plt.subplots(figsize=(10, 6))
    fig.suptitle(f'Cubic spline re-interpolation of {os.path.basename(input_file)}\n'
                 f'{len(x_samples)} samples, {len(xs)} points', fontsize=12)
    ax.plot(x_samples, y_samples, 'o', color='k', markersize=3, label='Samples')
    ax.plot(xs, ys, 'r-', label='Spline')
    ax.set_xlabel('x')
    ax.set_ylabel('f(x)')
    ax.legend(loc='best')
    ax.grid(True, which="both", ls="-", alpha=0.2)

    plt.tight_layout()

    # Save plot to a BytesIO object
    buf = io.BytesIO()
    plt.savefig(buf, format='png', dpi=150, bbox_inches='tight')
    buf.seek(0)
    plt.close(fig)

    return buf.getvalue()


def reinterpolate_file(input_file, n_points=DEFAULT_N_POINTS, plot=False, abort_on_failure=True):
    """
    Re-sample the tabulated function of input_file on n_points equally spaced
    arguments and write them to reint-<name> beside the input.

    Returns the path of the written table.
    """
    with InterpolatedFunction() as intfun:
        if abort_on_failure:
            intfun.init_from_file_or_abort(input_file)
        elif not intfun.init_from_file(input_file):
            raise FileNotFoundError(f"Can not initialize interp_funct using file {input_file} !")
        xs, ys = intfun.resample(n_points)

    out_name = output_path_for(input_file)
    write_table(out_name, xs, ys)

    if plot:
        with open(output_path_for(input_file, '.png'), 'wb') as f:
            f.write(plot_reinterpolation(input_file, xs, ys))
    return out_name


def parsed_args(argv=None):
    parser = ArgumentParser('reinterpolate',
                            description='Re-sample two-column tables with a natural cubic spline.')
    parser.add_argument('input_files', nargs='*', default=[DEFAULT_INPUT_FILE],
                        help=f'Two-column x y data files. Default: {DEFAULT_INPUT_FILE}.')
    parser.add_argument('-n', '--points', type=int, default=DEFAULT_N_POINTS,
                        help=f'Number of output points. Default: {DEFAULT_N_POINTS}.')
    parser.add_argument('--plot', action='store_true',
                        help='Also save a PNG of the samples and the spline.')
    parser.add_argument('-j', '--jobs', type=int, default=N_JOBS,
                        help=f'Parallel workers when several files are given. Default: {N_JOBS}.')
    args = parser.parse_args(argv)
    if args.points < 1:
        parser.error('--points must be positive')
    if args.jobs == 0:
        parser.error('--jobs must not be 0')
    return args


def main(argv=None):
    args = parsed_args(argv)

    if len(args.input_files) == 1:
        out_name = reinterpolate_file(args.input_files[0], args.points, args.plot)
        print(f"Saved re-interpolated table: {out_name}")
        return 0

    from joblib import Parallel, delayed

    # Define wrapper function, one InterpolatedFunction per task
    def process_file_safe(input_file):
        try:
            reinterpolate_file(input_file, args.points, args.plot, abort_on_failure=False)
            return input_file, True
        except Exception as e:
            print(f"Error processing {input_file}: {e}")
            return input_file, False

    n_jobs = min(args.jobs, len(args.input_files))
    print(f"Starting parallel processing of {len(args.input_files)} files with {n_jobs} workers...")
    results = Parallel(n_jobs=n_jobs, backend='loky')(
        delayed(process_file_safe)(input_file)
        for input_file in args.input_files
    )

    # Check for failures
    failed = [r[0] for r in results if not r[1]]
    if failed:
        print(f"Failed files ({len(failed)}): {failed}")
        return 1
    print("All files processed successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
