"""Static HTML snapshots of the portal pages used across tests."""

RESULTS_HTML = """
<html><body>
<h1>Beszámoló keresés</h1>
<table class="table">
  <thead><tr><th>Cégnév</th><th>Székhely</th><th>Adószám</th></tr></thead>
  <tbody>
    <tr>
      <td><a href="#">OTP BANK NYRT.<br>OTP BANK RÉSZVÉNYTÁRSASÁG<br>ORSZÁGOS TAKARÉKPÉNZTÁR</a></td>
      <td>1051 Budapest</td><td>10537914</td>
    </tr>
    <tr>
      <td><a href="#">OTP Bank Nyrt.</a></td>
      <td>1051 Budapest</td><td>10537914</td>
    </tr>
    <tr>
      <td><a href="#">OTP BANKHOLDING ZRT.</a></td>
      <td>1051 Budapest</td><td>12345678</td>
    </tr>
  </tbody>
</table>
</body></html>
"""

COMPANY_HTML = """
<html><body>
<div class="firm-data">
  <div>Cég neve: OTP Bank Nyrt.</div>
  <div>Cégjegyzékszáma: 01-10-041585</div>
  <div>Adószám: 10537914-4-44</div>
  <div>Székhely: 1051 Budapest, Nádor utca 16.</div>
</div>
<div class="balance-list">
  <div class="balance-container">
    <a class="view-obr-balance-link" data-code="OBR-2023" href="#">Éves beszámoló</a>
    <span>Közzététel: 2024. május 21.</span>
    <span>2023. január 01. - 2023. december 31.</span>
  </div>
  <div class="balance-container">
    <a class="view-obr-balance-link" data-code="OBR-2022" href="#">Éves beszámoló</a>
    <span>Közzététel: 2023. május 19.</span>
    <span>2022. január 01. - 2022. december 31.</span>
  </div>
  <div class="balance-container">
    <a class="view-obr-balance-link" data-code="OBR-2021" href="#">Éves beszámoló</a>
    <span>Közzététel: 2022. május 20.</span>
    <span>2021. január 01. - 2021. december 31.</span>
  </div>
</div>
</body></html>
"""

REPORT_HTML = """
<html><body>
<div class="report-header">
  <div>A cég elnevezése: OTP BANK NYRT.</div>
  <div>Nyilvántartási száma: 01-10-041585</div>
  <div>Adószáma: 10537914-4-44</div>
  <div>Székhely: 1051 Budapest</div>
  <div>Elfogadás időpontja: 2024. április 26.</div>
  <div>Pénznem: HUF</div>
  <div>Pénzegység: millió</div>
  <div>2023. január 01. - 2023. december 31. IDŐSZAKRA VONATKOZÓ</div>
</div>
<table class="balance">
  <tbody>
    <tr><td colspan="5">OTP BANK NYRT. MÉRLEGE</td></tr>
    <tr>
      <td>Sorszám</td><td>Tételsor elnevezése</td><td>Előző üzleti év</td>
      <td>Előző üzleti év módosításai</td><td>Tárgyév</td>
    </tr>
    <tr><td>001.</td><td>A. Befektetett eszközök</td><td>10.500</td><td>0</td><td>12.000</td></tr>
    <tr><td>101.</td><td>Tárgyi eszközök</td><td>1.234</td><td>0</td><td>1.500</td></tr>
    <tr><td>Összesen</td><td>Eszközök</td><td>11.734</td><td>0</td><td>13.500</td></tr>
  </tbody>
</table>
<table class="income">
  <tbody>
    <tr><td colspan="4">EREDMÉNYKIMUTATÁS (összköltség eljárással)</td></tr>
    <tr><td>001.</td><td>Belföldi értékesítés nettó árbevétele</td><td>2.000,5</td><td>2.500</td></tr>
    <tr><td>002</td><td>Exportértékesítés nettó árbevétele</td><td>—</td><td>n/a</td></tr>
    <tr><td>003.</td><td>Aktivált saját teljesítmények</td><td></td></tr>
  </tbody>
</table>
<table class="footer"><tbody><tr><td>999.</td><td>Nem kimutatás</td><td>1</td></tr></tbody></table>
</body></html>
"""

EMPTY_REPORT_HTML = """
<html><body>
<div>A cég elnevezése: OTP BANK NYRT.</div>
<div>2023. január 01. - 2023. december 31.</div>
<table><tbody><tr><td>MÉRLEGE</td></tr></tbody></table>
</body></html>
"""
