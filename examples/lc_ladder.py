import time

import jax.numpy as jnp
import matplotlib.pyplot as plt

from mnastamp import Netlist, ac_sweep
from mnastamp.analysis import plot_bode
from mnastamp.netlist import draw_circuit_graph

if __name__ == "__main__":
    # --- CONFIGURATION ---
    N_SECTIONS = 20
    R_SOURCE = 50.0   # Matched source
    R_LOAD = 50.0     # Matched load
    # ---------------------

    def create_lc_ladder(n_sections):
        """
        Generates a netlist for an L-C transmission line.
        V_in -> R_source -> [L-C] -> [L-C] ... -> R_load -> GND
        """
        netlist = Netlist()
        netlist.add("Vin", 1, 0, 1.0)
        netlist.add("Rs", 1, 2, R_SOURCE)

        previous_node = 2
        for i in range(n_sections):
            # L=10nH, C=4pF -> Z0 = sqrt(L/C) = 50 Ohms.
            node_inter = previous_node + 1
            netlist.add(f"L_{i}", previous_node, node_inter, 10e-9)
            netlist.add(f"C_{i}", node_inter, 0, 4e-12)
            previous_node = node_inter

        netlist.add("Rl", previous_node, 0, R_LOAD)
        return netlist, previous_node

    netlist, output_node = create_lc_ladder(N_SECTIONS)
    print(f"Ladder with {len(netlist)} elements, output at node {output_node}")

    # Cutoff of the ladder is 2/sqrt(LC) = 1e10 rad/s
    omegas = jnp.logspace(8, 10.5, 300)

    start = time.time()
    sweep = ac_sweep(netlist, omegas)
    print(f"Time taken = {time.time() - start:.4f}s")

    plot_bode(sweep, output_node, show=False)
    draw_circuit_graph(create_lc_ladder(3)[0], show=False)
    plt.show()
