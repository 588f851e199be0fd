import sys

from saxotrader.portfolio import Portfolio
from saxotrader.records.bookings import primary_of, underlying_of

# 1) Eksport "Bookings" z platformy (CSV, pierwsza linia to nagłówek)
#    Przykładowo: python examples/load_bookings.py data/bookings.csv
CSV_PATH = sys.argv[1] if len(sys.argv) > 1 else "data/bookings.csv"

with open(CSV_PATH, "r", encoding="utf-8-sig", newline="") as f:
    port = Portfolio().load_bookings(f)

print(f"=== KSIĘGOWANIA: {len(port)} (pominięte: {port.skipped}) ===")

# 2) Instrumenty po UIC
for uic, instr in sorted(port.instruments.items()):
    print(f"{uic:>10}  {instr.asset_type:<12} {instr.symbol}")

# 3) Pochodne razem z instrumentem bazowym
for asset in (port.asset_of(b) for b in port):
    base = underlying_of(asset)
    if base is not None:
        print(f"{primary_of(asset).symbol} -> {base.symbol}")

# 4) Suma kwot per typ kwoty (pandas)
df = port.to_frame()
if not df.empty:
    print(df.groupby("amount_type")["amount"].sum())
