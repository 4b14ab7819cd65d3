"""Static shares-outstanding estimates used when fundamentals are unavailable."""

from typing import Optional

DEFAULT_FALLBACK_SHARES = 1_000_000_000

# Keyed by normalized ticker
DEFAULT_SHARES: dict[str, int] = {
    # Major tech
    "AAPL.US": 15_400_000_000,
    "MSFT.US": 7_400_000_000,
    "GOOGL.US": 6_000_000_000,
    "GOOG.US": 6_000_000_000,
    "AMZN.US": 10_700_000_000,
    "TSLA.US": 3_200_000_000,
    "NVDA.US": 2_500_000_000,
    "META.US": 2_700_000_000,
    "NFLX.US": 440_000_000,
    "ADBE.US": 470_000_000,
    "CRM.US": 990_000_000,
    "ORCL.US": 2_700_000_000,
    "NOW.US": 200_000_000,
    "TEAM.US": 250_000_000,
    "WDAY.US": 260_000_000,
    "SHOP.US": 1_300_000_000,
    # Financial services
    "V.US": 2_100_000_000,
    "MA.US": 970_000_000,
    "JPM.US": 2_900_000_000,
    "BAC.US": 8_200_000_000,
    "WFC.US": 3_700_000_000,
    "GS.US": 340_000_000,
    "MS.US": 1_600_000_000,
    "AXP.US": 740_000_000,
    "PYPL.US": 1_100_000_000,
    "SQ.US": 610_000_000,
    # Healthcare & pharma
    "UNH.US": 930_000_000,
    "JNJ.US": 2_600_000_000,
    "PFE.US": 5_600_000_000,
    "ABT.US": 1_800_000_000,
    "TMO.US": 390_000_000,
    "DHR.US": 720_000_000,
    "BMY.US": 2_100_000_000,
    "ABBV.US": 1_800_000_000,
    "MRK.US": 2_500_000_000,
    "LLY.US": 950_000_000,
    "GILD.US": 1_300_000_000,
    "AMGN.US": 540_000_000,
    "REGN.US": 110_000_000,
    "VRTX.US": 260_000_000,
    "BIIB.US": 150_000_000,
    "ISRG.US": 360_000_000,
    # Consumer & retail
    "WMT.US": 2_700_000_000,
    "HD.US": 1_000_000_000,
    "COST.US": 440_000_000,
    "TGT.US": 460_000_000,
    "LOW.US": 690_000_000,
    "NKE.US": 1_500_000_000,
    "SBUX.US": 1_100_000_000,
    "MCD.US": 740_000_000,
    "DIS.US": 1_800_000_000,
    # Consumer goods
    "PG.US": 2_400_000_000,
    "KO.US": 4_300_000_000,
    "PEP.US": 1_400_000_000,
    "CL.US": 840_000_000,
    "KMB.US": 340_000_000,
    "GIS.US": 600_000_000,
    "K.US": 340_000_000,
    # Energy
    "XOM.US": 4_200_000_000,
    "CVX.US": 1_900_000_000,
    "COP.US": 1_300_000_000,
    "EOG.US": 580_000_000,
    "SLB.US": 1_400_000_000,
    # Semiconductors
    "TSM.US": 5_200_000_000,
    "AVGO.US": 460_000_000,
    "TXN.US": 900_000_000,
    "QCOM.US": 1_100_000_000,
    "AMD.US": 1_600_000_000,
    "INTC.US": 4_100_000_000,
    "MU.US": 1_100_000_000,
    "MRVL.US": 850_000_000,
    "AMAT.US": 900_000_000,
    "LRCX.US": 140_000_000,
    "KLA.US": 140_000_000,
    "SNPS.US": 150_000_000,
    "CDNS.US": 140_000_000,
    # Industrials
    "HON.US": 680_000_000,
    "UPS.US": 870_000_000,
    "CAT.US": 510_000_000,
    "DE.US": 300_000_000,
    "GE.US": 1_100_000_000,
    "MMM.US": 570_000_000,
    "LMT.US": 270_000_000,
    "RTX.US": 1_500_000_000,
    "BA.US": 590_000_000,
    "NOC.US": 160_000_000,
    "LHX.US": 420_000_000,
    # Cybersecurity & cloud
    "PANW.US": 330_000_000,
    "FTNT.US": 800_000_000,
    "CRWD.US": 240_000_000,
    "ZS.US": 140_000_000,
    "OKTA.US": 170_000_000,
    "NET.US": 330_000_000,
    "DDOG.US": 340_000_000,
    "SNOW.US": 340_000_000,
    "PLTR.US": 2_200_000_000,
    "S.US": 120_000_000,
    # Transportation & logistics
    "UBER.US": 2_000_000_000,
    "LYFT.US": 380_000_000,
    "ABNB.US": 640_000_000,
    "DASH.US": 380_000_000,
    "FDX.US": 260_000_000,
    # Gaming & entertainment
    "RBLX.US": 580_000_000,
    "EA.US": 280_000_000,
    "ATVI.US": 780_000_000,
    "TTWO.US": 110_000_000,
    # Fintech & crypto
    "COIN.US": 260_000_000,
    "HOOD.US": 880_000_000,
    "SOFI.US": 920_000_000,
    "UPST.US": 850_000_000,
    "AFRM.US": 300_000_000,
    # Biotech
    "MRNA.US": 380_000_000,
    "BNTX.US": 240_000_000,
    "NVAX.US": 780_000_000,
    # REITs
    "AMT.US": 450_000_000,
    "CCI.US": 470_000_000,
    "EQIX.US": 90_000_000,
    "PLD.US": 770_000_000,
    "SPG.US": 310_000_000,
    # Communications
    "VZ.US": 4_200_000_000,
    "T.US": 7_200_000_000,
    "TMUS.US": 1_300_000_000,
    "CHTR.US": 160_000_000,
    "CMCSA.US": 4_500_000_000,
}


def lookup_default_shares(ticker: str) -> Optional[int]:
    """Return the static estimate for a normalized ticker, if any."""
    return DEFAULT_SHARES.get(ticker.upper())
