import jax.numpy as jnp
import matplotlib.pyplot as plt

from mnastamp import BranchId, Netlist, ac_sweep
from mnastamp.analysis import bode


def main():
    # Circuit: GND -- Vsrc -- N1 -- Res -- N2 -- Ind -- N3 -- Cap -- GND
    # Series resonance at omega_0 = 1/sqrt(LC) = 1e3 rad/s, Q = sqrt(L/C)/R = 10
    netlist = Netlist()
    netlist.add("V1", 1, 0, 1.0)
    netlist.add("R1", 1, 2, 10.0)
    netlist.add("L1", 2, 3, 0.1)
    netlist.add("C1", 3, 0, 1e-5)

    print("1. Sweeping...")
    omegas = jnp.logspace(1, 5, 400)
    sweep = ac_sweep(netlist, omegas)
    print(f"   {len(omegas)} points, {len(sweep.nodes)} unknowns each.")

    branch_l1 = next(k for k in sweep.nodes if isinstance(k, BranchId) and k.element == "L1")
    i_ind = sweep.response(branch_l1)
    v_cap_db, v_cap_phase = bode(sweep, 3)

    peak = int(jnp.argmax(jnp.abs(i_ind)))
    print(f"   Peak current {float(jnp.abs(i_ind[peak])):.4f} A at {float(omegas[peak]):.1f} rad/s")

    print("2. Plotting...")
    fig, ax1 = plt.subplots(figsize=(8, 5))
    ax1.semilogx(omegas, v_cap_db, 'b-', label='Capacitor V (dB)')
    ax1.set_xlabel('Angular frequency (rad/s)')
    ax1.set_ylabel('Magnitude (dB)')
    ax1.legend(loc='upper left')

    ax2 = ax1.twinx()
    ax2.semilogx(omegas, jnp.abs(i_ind), 'r:', label='Inductor |I|')
    ax2.set_ylabel('Current (A)')
    ax2.legend(loc='upper right')

    plt.title("Series RLC Resonance")
    plt.grid(True)
    plt.show()

if __name__ == "__main__":
    main()
