"""
Command line driver.

    d2q9-bgk input.params obstacles.dat

Loads the inputs, runs max_iters timesteps, prints the Reynolds number and
elapsed times, and writes final_state.dat and av_vels.dat.
"""

import argparse
import sys
import time

from .boundary import load_obstacles
from .errors import LBMError
from .output import AV_VELS_FILE, FINAL_STATE_FILE, final_state_table, write_av_vels, write_final_state
from .parameters import load_parameters
from .simulator import Simulator


def build_parser():
    parser = argparse.ArgumentParser(
        prog="d2q9-bgk",
        description="D2Q9 BGK lattice Boltzmann simulation on a periodic grid with obstacles.",
    )
    parser.add_argument("paramfile", help="Parameter file (nx ny maxIters reynolds_dim density accel omega).")
    parser.add_argument("obstaclefile", help="Obstacle file, one 'x y 1' line per blocked cell.")
    parser.add_argument("--final-state", default=FINAL_STATE_FILE,
                        help=f"Final state output path (default: {FINAL_STATE_FILE}).")
    parser.add_argument("--av-vels", default=AV_VELS_FILE,
                        help=f"Average velocity output path (default: {AV_VELS_FILE}).")
    parser.add_argument("--plot", metavar="PATH", help="Save a speed/vorticity figure of the final state.")
    parser.add_argument("--numpy", action="store_true", help="Use the NumPy reference kernels instead of Numba.")
    parser.add_argument("--debug", action="store_true", help="Print av velocity and total density every timestep.")
    parser.add_argument("--verbose", action="store_true", help="Print progress reports.")
    parser.add_argument("--report-interval", type=int, default=1000,
                        help="Timesteps between progress reports (default: 1000).")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        tot_tic = init_tic = time.perf_counter()
        params = load_parameters(args.paramfile)
        mask = load_obstacles(args.obstaclefile, params)
        sim = Simulator(params, mask, use_fast=not args.numpy)

        init_toc = comp_tic = time.perf_counter()
        sim.run(verbose=args.verbose, report_interval=args.report_interval, debug=args.debug)

        comp_toc = col_tic = time.perf_counter()
        table = final_state_table(sim.current, mask, params)
        reynolds = sim.reynolds_number()

        col_toc = tot_toc = time.perf_counter()

        print("==done==")
        print(f"Reynolds number:\t\t{reynolds:.12E}")
        print(f"Elapsed Init time:\t\t\t{init_toc - init_tic:.6f} (s)")
        print(f"Elapsed Compute time:\t\t\t{comp_toc - comp_tic:.6f} (s)")
        print(f"Elapsed Collate time:\t\t\t{col_toc - col_tic:.6f} (s)")
        print(f"Elapsed Total time:\t\t\t{tot_toc - tot_tic:.6f} (s)")

        write_final_state(args.final_state, sim.current, mask, params, table=table)
        write_av_vels(args.av_vels, sim.av_vels)

        if args.plot:
            from .plotting import plot_final_state
            plot_final_state(sim.current, mask, params, save_path=args.plot,
                             title=f"Re = {reynolds:.3e}")
    except LBMError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
