"""
Country table (ISO 3166-1 + international dialling code)
"""
from typing import Dict, List, NamedTuple, Optional


class Country(NamedTuple):
    name: str
    alpha2: str
    alpha3: str
    numeric: str
    phone_code: str


COUNTRIES: List[Country] = [
    Country("Afghanistan", "AF", "AFG", "004", "+93"),
    Country("Albania", "AL", "ALB", "008", "+355"),
    Country("Algeria", "DZ", "DZA", "012", "+213"),
    Country("American Samoa", "AS", "ASM", "016", "+1"),
    Country("Andorra", "AD", "AND", "020", "+376"),
    Country("Angola", "AO", "AGO", "024", "+244"),
    Country("Anguilla", "AI", "AIA", "660", "+1"),
    Country("Antarctica", "AQ", "ATA", "010", "+672"),
    Country("Antigua and Barbuda", "AG", "ATG", "028", "+1"),
    Country("Argentina", "AR", "ARG", "032", "+54"),
    Country("Armenia", "AM", "ARM", "051", "+374"),
    Country("Aruba", "AW", "ABW", "533", "+297"),
    Country("Australia", "AU", "AUS", "036", "+61"),
    Country("Austria", "AT", "AUT", "040", "+43"),
    Country("Azerbaijan", "AZ", "AZE", "031", "+994"),
    Country("Bahamas", "BS", "BHS", "044", "+1"),
    Country("Bahrain", "BH", "BHR", "048", "+973"),
    Country("Bangladesh", "BD", "BGD", "050", "+880"),
    Country("Barbados", "BB", "BRB", "052", "+1"),
    Country("Belarus", "BY", "BLR", "112", "+375"),
    Country("Belgium", "BE", "BEL", "056", "+32"),
    Country("Belize", "BZ", "BLZ", "084", "+501"),
    Country("Benin", "BJ", "BEN", "204", "+229"),
    Country("Bermuda", "BM", "BMU", "060", "+1"),
    Country("Bhutan", "BT", "BTN", "064", "+975"),
    Country("Bolivia", "BO", "BOL", "068", "+591"),
    Country("Bonaire, Sint Eustatius and Saba", "BQ", "BES", "535", "+599"),
    Country("Bosnia and Herzegovina", "BA", "BIH", "070", "+387"),
    Country("Botswana", "BW", "BWA", "072", "+267"),
    Country("Bouvet Island", "BV", "BVT", "074", "+47"),
    Country("Brazil", "BR", "BRA", "076", "+55"),
    Country("British Indian Ocean Territory", "IO", "IOT", "086", "+246"),
    Country("Brunei Darussalam", "BN", "BRN", "096", "+673"),
    Country("Bulgaria", "BG", "BGR", "100", "+359"),
    Country("Burkina Faso", "BF", "BFA", "854", "+226"),
    Country("Burundi", "BI", "BDI", "108", "+257"),
    Country("Cabo Verde", "CV", "CPV", "132", "+238"),
    Country("Cambodia", "KH", "KHM", "116", "+855"),
    Country("Cameroon", "CM", "CMR", "120", "+237"),
    Country("Canada", "CA", "CAN", "124", "+1"),
    Country("Cayman Islands", "KY", "CYM", "136", "+1"),
    Country("Central African Republic", "CF", "CAF", "140", "+236"),
    Country("Chad", "TD", "TCD", "148", "+235"),
    Country("Chile", "CL", "CHL", "152", "+56"),
    Country("China", "CN", "CHN", "156", "+86"),
    Country("Christmas Island", "CX", "CXR", "162", "+61"),
    Country("Cocos (Keeling) Islands", "CC", "CCK", "166", "+61"),
    Country("Colombia", "CO", "COL", "170", "+57"),
    Country("Comoros", "KM", "COM", "174", "+269"),
    Country("Congo (Democratic Republic)", "CD", "COD", "180", "+243"),
    Country("Congo", "CG", "COG", "178", "+242"),
    Country("Cook Islands", "CK", "COK", "184", "+682"),
    Country("Costa Rica", "CR", "CRI", "188", "+506"),
    Country("Croatia", "HR", "HRV", "191", "+385"),
    Country("Cuba", "CU", "CUB", "192", "+53"),
    Country("Curaçao", "CW", "CUW", "531", "+599"),
    Country("Cyprus", "CY", "CYP", "196", "+357"),
    Country("Czechia", "CZ", "CZE", "203", "+420"),
    Country("Côte d'Ivoire", "CI", "CIV", "384", "+225"),
    Country("Denmark", "DK", "DNK", "208", "+45"),
    Country("Djibouti", "DJ", "DJI", "262", "+253"),
    Country("Dominica", "DM", "DMA", "212", "+1"),
    Country("Dominican Republic", "DO", "DOM", "214", "+1"),
    Country("Ecuador", "EC", "ECU", "218", "+593"),
    Country("Egypt", "EG", "EGY", "818", "+20"),
    Country("El Salvador", "SV", "SLV", "222", "+503"),
    Country("Equatorial Guinea", "GQ", "GNQ", "226", "+240"),
    Country("Eritrea", "ER", "ERI", "232", "+291"),
    Country("Estonia", "EE", "EST", "233", "+372"),
    Country("Eswatini", "SZ", "SWZ", "748", "+268"),
    Country("Ethiopia", "ET", "ETH", "231", "+251"),
    Country("Falkland Islands", "FK", "FLK", "238", "+500"),
    Country("Faroe Islands", "FO", "FRO", "234", "+298"),
    Country("Fiji", "FJ", "FJI", "242", "+679"),
    Country("Finland", "FI", "FIN", "246", "+358"),
    Country("France", "FR", "FRA", "250", "+33"),
    Country("French Guiana", "GF", "GUF", "254", "+594"),
    Country("French Polynesia", "PF", "PYF", "258", "+689"),
    Country("French Southern Territories", "TF", "ATF", "260", "+262"),
    Country("Gabon", "GA", "GAB", "266", "+241"),
    Country("Gambia", "GM", "GMB", "270", "+220"),
    Country("Georgia", "GE", "GEO", "268", "+995"),
    Country("Germany", "DE", "DEU", "276", "+49"),
    Country("Ghana", "GH", "GHA", "288", "+233"),
    Country("Gibraltar", "GI", "GIB", "292", "+350"),
    Country("Greece", "GR", "GRC", "300", "+30"),
    Country("Greenland", "GL", "GRL", "304", "+299"),
    Country("Grenada", "GD", "GRD", "308", "+1"),
    Country("Guadeloupe", "GP", "GLP", "312", "+590"),
    Country("Guam", "GU", "GUM", "316", "+1"),
    Country("Guatemala", "GT", "GTM", "320", "+502"),
    Country("Guernsey", "GG", "GGY", "831", "+44"),
    Country("Guinea", "GN", "GIN", "324", "+224"),
    Country("Guinea-Bissau", "GW", "GNB", "624", "+245"),
    Country("Guyana", "GY", "GUY", "328", "+592"),
    Country("Haiti", "HT", "HTI", "332", "+509"),
    Country("Heard Island and McDonald Islands", "HM", "HMD", "334", "+672"),
    Country("Holy See", "VA", "VAT", "336", "+39"),
    Country("Honduras", "HN", "HND", "340", "+504"),
    Country("Hong Kong", "HK", "HKG", "344", "+852"),
    Country("Hungary", "HU", "HUN", "348", "+36"),
    Country("Iceland", "IS", "ISL", "352", "+354"),
    Country("India", "IN", "IND", "356", "+91"),
    Country("Indonesia", "ID", "IDN", "360", "+62"),
    Country("Iran", "IR", "IRN", "364", "+98"),
    Country("Iraq", "IQ", "IRQ", "368", "+964"),
    Country("Ireland", "IE", "IRL", "372", "+353"),
    Country("Isle of Man", "IM", "IMN", "833", "+44"),
    Country("Israel", "IL", "ISR", "376", "+972"),
    Country("Italy", "IT", "ITA", "380", "+39"),
    Country("Jamaica", "JM", "JAM", "388", "+1"),
    Country("Japan", "JP", "JPN", "392", "+81"),
    Country("Jersey", "JE", "JEY", "832", "+44"),
    Country("Jordan", "JO", "JOR", "400", "+962"),
    Country("Kazakhstan", "KZ", "KAZ", "398", "+7"),
    Country("Kenya", "KE", "KEN", "404", "+254"),
    Country("Kiribati", "KI", "KIR", "296", "+686"),
    Country("Korea (North)", "KP", "PRK", "408", "+850"),
    Country("Korea (South)", "KR", "KOR", "410", "+82"),
    Country("Kuwait", "KW", "KWT", "414", "+965"),
    Country("Kyrgyzstan", "KG", "KGZ", "417", "+996"),
    Country("Lao People's Democratic Republic", "LA", "LAO", "418", "+856"),
    Country("Latvia", "LV", "LVA", "428", "+371"),
    Country("Lebanon", "LB", "LBN", "422", "+961"),
    Country("Lesotho", "LS", "LSO", "426", "+266"),
    Country("Liberia", "LR", "LBR", "430", "+231"),
    Country("Libya", "LY", "LBY", "434", "+218"),
    Country("Liechtenstein", "LI", "LIE", "438", "+423"),
    Country("Lithuania", "LT", "LTU", "440", "+370"),
    Country("Luxembourg", "LU", "LUX", "442", "+352"),
    Country("Macao", "MO", "MAC", "446", "+853"),
    Country("Madagascar", "MG", "MDG", "450", "+261"),
    Country("Malawi", "MW", "MWI", "454", "+265"),
    Country("Malaysia", "MY", "MYS", "458", "+60"),
    Country("Maldives", "MV", "MDV", "462", "+960"),
    Country("Mali", "ML", "MLI", "466", "+223"),
    Country("Malta", "MT", "MLT", "470", "+356"),
    Country("Marshall Islands", "MH", "MHL", "584", "+692"),
    Country("Martinique", "MQ", "MTQ", "474", "+596"),
    Country("Mauritania", "MR", "MRT", "478", "+222"),
    Country("Mauritius", "MU", "MUS", "480", "+230"),
    Country("Mayotte", "YT", "MYT", "175", "+262"),
    Country("Mexico", "MX", "MEX", "484", "+52"),
    Country("Micronesia", "FM", "FSM", "583", "+691"),
    Country("Moldova", "MD", "MDA", "498", "+373"),
    Country("Monaco", "MC", "MCO", "492", "+377"),
    Country("Mongolia", "MN", "MNG", "496", "+976"),
    Country("Montenegro", "ME", "MNE", "499", "+382"),
    Country("Montserrat", "MS", "MSR", "500", "+1"),
    Country("Morocco", "MA", "MAR", "504", "+212"),
    Country("Mozambique", "MZ", "MOZ", "508", "+258"),
    Country("Myanmar", "MM", "MMR", "104", "+95"),
    Country("Namibia", "NA", "NAM", "516", "+264"),
    Country("Nauru", "NR", "NRU", "520", "+674"),
    Country("Nepal", "NP", "NPL", "524", "+977"),
    Country("Netherlands", "NL", "NLD", "528", "+31"),
    Country("New Caledonia", "NC", "NCL", "540", "+687"),
    Country("New Zealand", "NZ", "NZL", "554", "+64"),
    Country("Nicaragua", "NI", "NIC", "558", "+505"),
    Country("Niger", "NE", "NER", "562", "+227"),
    Country("Nigeria", "NG", "NGA", "566", "+234"),
    Country("Niue", "NU", "NIU", "570", "+683"),
    Country("Norfolk Island", "NF", "NFK", "574", "+672"),
    Country("Northern Mariana Islands", "MP", "MNP", "580", "+1"),
    Country("Norway", "NO", "NOR", "578", "+47"),
    Country("Oman", "OM", "OMN", "512", "+968"),
    Country("Pakistan", "PK", "PAK", "586", "+92"),
    Country("Palau", "PW", "PLW", "585", "+680"),
    Country("Palestine", "PS", "PSE", "275", "+970"),
    Country("Panama", "PA", "PAN", "591", "+507"),
    Country("Papua New Guinea", "PG", "PNG", "598", "+675"),
    Country("Paraguay", "PY", "PRY", "600", "+595"),
    Country("Peru", "PE", "PER", "604", "+51"),
    Country("Philippines", "PH", "PHL", "608", "+63"),
    Country("Pitcairn", "PN", "PCN", "612", "+64"),
    Country("Poland", "PL", "POL", "616", "+48"),
    Country("Portugal", "PT", "PRT", "620", "+351"),
    Country("Puerto Rico", "PR", "PRI", "630", "+1"),
    Country("Qatar", "QA", "QAT", "634", "+974"),
    Country("Republic of North Macedonia", "MK", "MKD", "807", "+389"),
    Country("Romania", "RO", "ROU", "642", "+40"),
    Country("Russian Federation", "RU", "RUS", "643", "+7"),
    Country("Rwanda", "RW", "RWA", "646", "+250"),
    Country("Réunion", "RE", "REU", "638", "+262"),
    Country("Saint Barthélemy", "BL", "BLM", "652", "+590"),
    Country("Saint Helena, Ascension and Tristan da Cunha", "SH", "SHN", "654", "+290"),
    Country("Saint Kitts and Nevis", "KN", "KNA", "659", "+1"),
    Country("Saint Lucia", "LC", "LCA", "662", "+1"),
    Country("Saint Martin (French part)", "MF", "MAF", "663", "+590"),
    Country("Saint Pierre and Miquelon", "PM", "SPM", "666", "+508"),
    Country("Saint Vincent and the Grenadines", "VC", "VCT", "670", "+1"),
    Country("Samoa", "WS", "WSM", "882", "+685"),
    Country("San Marino", "SM", "SMR", "674", "+378"),
    Country("Sao Tome and Principe", "ST", "STP", "678", "+239"),
    Country("Saudi Arabia", "SA", "SAU", "682", "+966"),
    Country("Senegal", "SN", "SEN", "686", "+221"),
    Country("Serbia", "RS", "SRB", "688", "+381"),
    Country("Seychelles", "SC", "SYC", "690", "+248"),
    Country("Sierra Leone", "SL", "SLE", "694", "+232"),
    Country("Singapore", "SG", "SGP", "702", "+65"),
    Country("Sint Maarten (Dutch part)", "SX", "SXM", "534", "+1"),
    Country("Slovakia", "SK", "SVK", "703", "+421"),
    Country("Slovenia", "SI", "SVN", "705", "+386"),
    Country("Solomon Islands", "SB", "SLB", "090", "+677"),
    Country("Somalia", "SO", "SOM", "706", "+252"),
    Country("South Africa", "ZA", "ZAF", "710", "+27"),
    Country("South Georgia and the South Sandwich Islands", "GS", "SGS", "239", "+500"),
    Country("South Sudan", "SS", "SSD", "728", "+211"),
    Country("Spain", "ES", "ESP", "724", "+34"),
    Country("Sri Lanka", "LK", "LKA", "144", "+94"),
    Country("Sudan", "SD", "SDN", "729", "+249"),
    Country("Suriname", "SR", "SUR", "740", "+597"),
    Country("Svalbard and Jan Mayen", "SJ", "SJM", "744", "+47"),
    Country("Sweden", "SE", "SWE", "752", "+46"),
    Country("Switzerland", "CH", "CHE", "756", "+41"),
    Country("Syrian Arab Republic", "SY", "SYR", "760", "+963"),
    Country("Taiwan", "TW", "TWN", "158", "+886"),
    Country("Tajikistan", "TJ", "TJK", "762", "+992"),
    Country("Tanzania", "TZ", "TZA", "834", "+255"),
    Country("Thailand", "TH", "THA", "764", "+66"),
    Country("Timor-Leste", "TL", "TLS", "626", "+670"),
    Country("Togo", "TG", "TGO", "768", "+228"),
    Country("Tokelau", "TK", "TKL", "772", "+690"),
    Country("Tonga", "TO", "TON", "776", "+676"),
    Country("Trinidad and Tobago", "TT", "TTO", "780", "+1"),
    Country("Tunisia", "TN", "TUN", "788", "+216"),
    Country("Turkey", "TR", "TUR", "792", "+90"),
    Country("Turkmenistan", "TM", "TKM", "795", "+993"),
    Country("Turks and Caicos Islands", "TC", "TCA", "796", "+1"),
    Country("Tuvalu", "TV", "TUV", "798", "+688"),
    Country("Uganda", "UG", "UGA", "800", "+256"),
    Country("Ukraine", "UA", "UKR", "804", "+380"),
    Country("United Arab Emirates", "AE", "ARE", "784", "+971"),
    Country("United Kingdom", "GB", "GBR", "826", "+44"),
    Country("United States Minor Outlying Islands", "UM", "UMI", "581", "+1"),
    Country("United States", "US", "USA", "840", "+1"),
    Country("Uruguay", "UY", "URY", "858", "+598"),
    Country("Uzbekistan", "UZ", "UZB", "860", "+998"),
    Country("Vanuatu", "VU", "VUT", "548", "+678"),
    Country("Venezuela", "VE", "VEN", "862", "+58"),
    Country("Viet Nam", "VN", "VNM", "704", "+84"),
    Country("Virgin Islands (British)", "VG", "VGB", "092", "+1"),
    Country("Virgin Islands (U.S.)", "VI", "VIR", "850", "+1"),
    Country("Wallis and Futuna", "WF", "WLF", "876", "+681"),
    Country("Western Sahara", "EH", "ESH", "732", "+212"),
    Country("Yemen", "YE", "YEM", "887", "+967"),
    Country("Zambia", "ZM", "ZMB", "894", "+260"),
    Country("Zimbabwe", "ZW", "ZWE", "716", "+263"),
    Country("Åland Islands", "AX", "ALA", "248", "+358"),
]

# shared dialling codes are shown under this country
PREFERRED_PHONE_COUNTRY = {
    "+1": "United States",
    "+44": "United Kingdom",
    "+61": "Australia",
    "+64": "New Zealand",
}

PRIORITY_PHONE_CODES = [
    "+1", "+44", "+81", "+86", "+91", "+49", "+33", "+61", "+55",
    "+52", "+82", "+39", "+34", "+31", "+971", "+966", "+20",
]

_BY_NAME: Dict[str, Country] = {c.name.lower(): c for c in COUNTRIES}
_BY_ALPHA2: Dict[str, Country] = {c.alpha2: c for c in COUNTRIES}


def find_country(value: Optional[str]) -> Optional[Country]:
    """Look a country up by name or alpha-2 code"""
    if not value:
        return None
    value = value.strip()
    if len(value) == 2 and value.upper() in _BY_ALPHA2:
        return _BY_ALPHA2[value.upper()]
    return _BY_NAME.get(value.lower())


def countries_sorted() -> List[str]:
    return sorted(c.name for c in COUNTRIES)


def phone_code_for_country(name: str) -> Optional[str]:
    country = find_country(name)
    return country.phone_code if country else None


def flag_emoji(alpha2: str) -> str:
    """"JP" -> regional indicator pair, anything else -> globe"""
    if not alpha2 or len(alpha2) != 2:
        return "🌐"
    a = ord(alpha2[0].upper()) - 0x41
    b = ord(alpha2[1].upper()) - 0x41
    if not (0 <= a <= 25 and 0 <= b <= 25):
        return "🌐"
    return chr(0x1F1E6 + a) + chr(0x1F1E6 + b)


def phone_code_options() -> List[Dict[str, str]]:
    """
    Unique dialling codes for a picker, priority codes first,
    then by code length and code.
    """
    code_map: Dict[str, List[Country]] = {}
    for country in COUNTRIES:
        code_map.setdefault(country.phone_code, []).append(country)

    options = []
    for code, countries in code_map.items():
        names = [c.name for c in countries]
        preferred = PREFERRED_PHONE_COUNTRY.get(code)
        display = preferred if preferred in names else names[0]
        label = f"{code} {display}"
        if len(countries) > 1:
            label += f" (+{len(countries) - 1} more)"
        options.append({
            "code": code,
            "flag": flag_emoji(_BY_NAME[display.lower()].alpha2),
            "label": label,
        })

    def sort_key(option):
        code = option["code"]
        if code in PRIORITY_PHONE_CODES:
            return (0, PRIORITY_PHONE_CODES.index(code), 0, "")
        return (1, 0, len(code), code)

    return sorted(options, key=sort_key)
