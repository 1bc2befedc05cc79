import numpy as np
import matplotlib.pyplot as plt

from mnastamp import Netlist, analyze_circuit
from mnastamp.netlist import build_net_map, draw_circuit_graph

if __name__ == "__main__":
    # 1. Define Netlist: 3-Bit R-2R Ladder
    # V1 is the Reference (8.0V)
    # R = 1k, 2R = 2k
    net_dict = {
        "instances": {
            "GND": {"component": "ground"},
            "V_REF": {"component": "source_voltage", "settings": {"V": 8.0}},

            # --- Stage 1 (MSB) ---
            "R_S1": {"component": "resistor", "settings": {"R": 1000.0}}, # Series R
            "R_P1": {"component": "resistor", "settings": {"R": 2000.0}}, # Parallel 2R

            # --- Stage 2 ---
            "R_S2": {"component": "resistor", "settings": {"R": 1000.0}},
            "R_P2": {"component": "resistor", "settings": {"R": 2000.0}},

            # --- Stage 3 (LSB) ---
            "R_S3": {"component": "resistor", "settings": {"R": 1000.0}},
            "R_P3": {"component": "resistor", "settings": {"R": 2000.0}},

            # --- Termination ---
            "R_TERM": {"component": "resistor", "settings": {"R": 2000.0}}, # 2R Termination
        },
        "connections": {
            "GND,p1": ("V_REF,p2", "R_P1,p2", "R_P2,p2", "R_P3,p2", "R_TERM,p2"),
            "V_REF,p1": "R_S1,p1",
            "R_S1,p2": ("R_P1,p1", "R_S2,p1"), # Node 1 splits to Parallel and Next Series
            "R_S2,p2": ("R_P2,p1", "R_S3,p1"), # Node 2 splits
            "R_S3,p2": ("R_P3,p1", "R_TERM,p1"), # Node 3 (End of chain)
        }
    }

    print("1. Building Netlist...")
    netlist = Netlist.from_dict(net_dict)
    port_map, num_nets = build_net_map(net_dict)
    print(f"   {len(netlist)} elements on {num_nets} nets")

    print("\n2. Solving DC Operating Point...")
    result = analyze_circuit(netlist, "dc")

    # Total resistance seen by V_ref is 2k, and the voltage halves at every series node.
    def get_v(port):
        return result[port_map[port]].real

    v_n1 = get_v("R_S1,p2")
    v_n2 = get_v("R_S2,p2")
    v_n3 = get_v("R_S3,p2")

    print("\n3. Verification:")
    print(f"   V_REF:    8.0 V")
    print(f"   Node 1:   {v_n1:.4f} V  (Expected: 4.0000 V)")
    print(f"   Node 2:   {v_n2:.4f} V  (Expected: 2.0000 V)")
    print(f"   Node 3:   {v_n3:.4f} V  (Expected: 1.0000 V)")

    # 4. Visualization
    draw_circuit_graph(netlist, show=False)

    nodes = ['Node 1', 'Node 2', 'Node 3']
    voltages = [v_n1, v_n2, v_n3]
    expected = [4.0, 2.0, 1.0]

    plt.figure(figsize=(8, 4))
    x = np.arange(len(nodes))
    width = 0.35

    plt.bar(x - width/2, expected, width, label='Theoretical', color='gray', alpha=0.5)
    plt.bar(x + width/2, voltages, width, label='Solver Output', color='tab:blue', alpha=0.8)

    plt.ylabel('Voltage (V)')
    plt.title('DC Solver Accuracy Test (R-2R Ladder)')
    plt.xticks(x, nodes)
    plt.legend()
    plt.grid(axis='y', linestyle='--', alpha=0.7)

    max_err = np.max(np.abs(np.array(voltages) - np.array(expected)))
    plt.text(1, 3, f"Max Error: {max_err:.2e} V", ha='center', fontsize=12, bbox=dict(facecolor='white', alpha=0.8))

    plt.show()
