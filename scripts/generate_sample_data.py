"""
Generate a synthetic soil-sensor CSV dataset and register it in the
flat-file dataset store, for demos and manual testing of the API.

Usage:
    python scripts/generate_sample_data.py [--rows 200] [--data-dir data/]
"""

import argparse
import json
import sys
from datetime import datetime, timezone
from pathlib import Path

import numpy as np
import pandas as pd

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from farmadvisor.config import get_settings


def generate_soil_samples(n_rows: int = 200, seed: int = 42,
                          anomaly_rate: float = 0.03) -> pd.DataFrame:
    """
    Sensor-style soil readings with a few injected faults (zero readings,
    out-of-range pH and nutrient spikes) so every anomaly rule can fire.
    """
    rng = np.random.default_rng(seed)

    # Field profiles: (ph_mean, ph_std, N, N_std, P, P_std, K, K_std, moist, moist_std, temp, temp_std)
    profiles = {
        "loam_irrigated": (6.6, 0.4, 70, 15, 38, 8, 120, 25, 42, 8, 24, 3),
        "acidic_upland":  (5.2, 0.3, 35, 10, 18, 5, 60, 15, 25, 6, 19, 3),
        "alkaline_plain": (7.9, 0.3, 55, 12, 25, 6, 180, 30, 18, 5, 31, 4),
    }
    names = list(profiles)
    records = []
    for i in range(n_rows):
        field_type = names[i % len(names)]
        ph_m, ph_s, n_m, n_s, p_m, p_s, k_m, k_s, m_m, m_s, t_m, t_s = profiles[field_type]
        records.append({
            "sample_id": f"S{i + 1:04d}",
            "field_type": field_type,
            "pH": round(float(np.clip(rng.normal(ph_m, ph_s), 3.5, 9.5)), 2),
            "Nitrogen": round(max(0.0, rng.normal(n_m, n_s)), 1),
            "Phosphorus": round(max(0.0, rng.normal(p_m, p_s)), 1),
            "Potassium": round(max(0.0, rng.normal(k_m, k_s)), 1),
            "moisture": round(float(np.clip(rng.normal(m_m, m_s), 0, 100)), 1),
            "temperature": round(rng.normal(t_m, t_s), 1),
        })

    df = pd.DataFrame(records)
    n_faults = max(1, int(n_rows * anomaly_rate))
    fault_rows = rng.choice(n_rows, size=min(n_rows, n_faults * 3), replace=False)
    for j, idx in enumerate(fault_rows):
        kind = j % 3
        if kind == 0:
            df.loc[idx, "Nitrogen"] = 0.0
        elif kind == 1:
            df.loc[idx, "pH"] = 10.8
        else:
            df.loc[idx, "Potassium"] = 320.0
    return df


def register_dataset(df: pd.DataFrame, data_dir: Path, original_name: str) -> str:
    """Write the CSV into uploads/ and append it to datasets.json."""
    uploads = data_dir / "uploads"
    uploads.mkdir(parents=True, exist_ok=True)
    ts = int(datetime.now(timezone.utc).timestamp() * 1000)
    file_name = f"{ts}-{original_name}"
    content = df.to_csv(index=False)
    (uploads / file_name).write_text(content, encoding="utf-8")

    index_path = data_dir / "datasets.json"
    entries = json.loads(index_path.read_text(encoding="utf-8")) if index_path.exists() else []
    entries.append({
        "file": file_name,
        "originalName": original_name,
        "uploadedAt": datetime.now(timezone.utc).isoformat(),
        "size": len(content.encode("utf-8")),
    })
    index_path.write_text(json.dumps(entries, indent=2), encoding="utf-8")
    return file_name


def main():
    parser = argparse.ArgumentParser(description="Generate a synthetic soil dataset")
    parser.add_argument("--rows", type=int, default=200, help="Number of samples")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--data-dir", default=None, help="Data directory (default: FARMADVISOR_DATA_DIR)")
    parser.add_argument("--name", default="sample_soil.csv", help="Original file name")
    args = parser.parse_args()

    data_dir = Path(args.data_dir) if args.data_dir else get_settings().data_dir
    df = generate_soil_samples(args.rows, seed=args.seed)
    file_name = register_dataset(df, data_dir, args.name)
    print(f"Generated {len(df)} rows -> {data_dir / 'uploads' / file_name}")


if __name__ == "__main__":
    main()
