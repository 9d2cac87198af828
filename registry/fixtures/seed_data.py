"""
Reference data used by the seed_database command.
"""

FIRST_NAMES_MALE = [
    'Marko', 'Stefan', 'Nikola', 'Luka', 'Aleksandar', 'Miloš', 'Jovan', 'Petar',
    'Đorđe', 'Filip', 'Nemanja', 'Vladimir', 'Milan', 'Dušan', 'Bojan', 'Igor',
    'Dejan', 'Zoran', 'Dragan', 'Goran',
]

FIRST_NAMES_FEMALE = [
    'Milica', 'Jelena', 'Ana', 'Marija', 'Jovana', 'Teodora', 'Katarina', 'Sara',
    'Anastasija', 'Sofija', 'Dragana', 'Snežana', 'Maja', 'Ivana', 'Tamara',
    'Nataša', 'Vesna', 'Jasmina', 'Gordana', 'Biljana',
]

LAST_NAMES = [
    'Petrović', 'Nikolić', 'Jovanović', 'Đorđević', 'Ilić', 'Marković', 'Pavlović',
    'Stojanović', 'Simić', 'Popović', 'Stanković', 'Milošević', 'Kostić', 'Stefanović',
    'Mladenović', 'Živković', 'Tomić', 'Dimitrijević', 'Vasiljević', 'Lazić',
    'Todorović', 'Radovanović', 'Milenković', 'Antić', 'Ristić',
]

# Municipalities per district
CITIES = {
    'Belgrade': ['Stari Grad', 'Vračar', 'Savski Venac', 'Palilula', 'Novi Beograd', 'Zemun', 'Čukarica',
                 'Rakovica', 'Zvezdara', 'Voždovac', 'Surčin', 'Barajevo', 'Grocka', 'Lazarevac',
                 'Mladenovac', 'Obrenovac', 'Sopot'],
    'Južna Bačka': ['Novi Sad', 'Bačka Palanka', 'Bački Petrovac', 'Beočin', 'Bečej', 'Srbobran',
                    'Temerin', 'Titel', 'Vrbas', 'Žabalj'],
    'Severna Bačka': ['Subotica', 'Bačka Topola', 'Mali Iđoš'],
    'Zapadna Bačka': ['Sombor', 'Apatin', 'Kula', 'Odžaci'],
    'Srednji Banat': ['Zrenjanin', 'Novi Bečej', 'Nova Crnja', 'Žitište', 'Sečanj'],
    'Severni Banat': ['Kikinda', 'Ada', 'Čoka', 'Kanjiža', 'Novi Kneževac', 'Senta'],
    'Južni Banat': ['Pančevo', 'Alibunar', 'Bela Crkva', 'Kovačica', 'Kovin', 'Opovo', 'Plandište', 'Vršac'],
    'Srem': ['Sremska Mitrovica', 'Inđija', 'Irig', 'Pećinci', 'Ruma', 'Šid', 'Stara Pazova'],
    'Mačva': ['Šabac', 'Bogatić', 'Koceljeva', 'Krupanj', 'Loznica', 'Ljubovija', 'Mali Zvornik', 'Vladimirci'],
    'Kolubara': ['Valjevo', 'Lajkovac', 'Ljig', 'Mionica', 'Osečina', 'Ub'],
    'Podunavlje': ['Smederevo', 'Smederevska Palanka', 'Velika Plana'],
    'Braničevo': ['Požarevac', 'Petrovac na Mlavi', 'Veliko Gradište', 'Golubac', 'Kučevo',
                  'Malo Crniće', 'Žabari'],
    'Šumadija': ['Kragujevac', 'Aranđelovac', 'Batočina', 'Knić', 'Lapovo', 'Rača', 'Topola'],
    'Pomoravlje': ['Jagodina', 'Ćuprija', 'Despotovac', 'Paraćin', 'Rekovac', 'Svilajnac'],
    'Bor': ['Bor', 'Kladovo', 'Majdanpek', 'Negotin'],
    'Zaječar': ['Zaječar', 'Boljevac', 'Knjaževac', 'Sokobanja'],
    'Zlatibor': ['Užice', 'Arilje', 'Bajina Bašta', 'Čajetina', 'Kosjerić', 'Nova Varoš', 'Požega',
                 'Priboj', 'Prijepolje', 'Sjenica'],
    'Moravica': ['Čačak', 'Gornji Milanovac', 'Ivanjica', 'Lučani'],
    'Raška': ['Kraljevo', 'Novi Pazar', 'Raška', 'Tutin', 'Vrnjačka Banja'],
    'Rasina': ['Kruševac', 'Aleksandrovac', 'Brus', 'Ćićevac', 'Trstenik', 'Varvarin'],
    'Nišava': ['Niš', 'Aleksinac', 'Doljevac', 'Gadžin Han', 'Merošina', 'Ražanj', 'Svrljig'],
    'Toplica': ['Prokuplje', 'Blace', 'Kuršumlija', 'Žitorađa'],
    'Pirot': ['Pirot', 'Babušnica', 'Bela Palanka', 'Dimitrovgrad'],
    'Jablanica': ['Leskovac', 'Bojnik', 'Crna Trava', 'Lebane', 'Medveđa', 'Vlasotince'],
    'Pčinja': ['Vranje', 'Bosilegrad', 'Bujanovac', 'Preševo', 'Surdulica', 'Trgovište', 'Vladičin Han'],
}

# (lat_min, lat_max), (lng_min, lng_max) per district
COORDINATE_BOUNDS = {
    'Belgrade': ((44.75, 44.88), (20.35, 20.58)),
    'Južna Bačka': ((45.20, 45.35), (19.65, 20.10)),
    'Severna Bačka': ((45.85, 46.10), (19.50, 19.90)),
    'Zapadna Bačka': ((45.60, 45.80), (18.90, 19.30)),
    'Srednji Banat': ((45.35, 45.55), (20.20, 20.60)),
    'Severni Banat': ((45.70, 45.95), (20.20, 20.60)),
    'Južni Banat': ((44.80, 45.20), (20.55, 21.30)),
    'Srem': ((44.90, 45.15), (19.40, 20.10)),
    'Mačva': ((44.45, 44.80), (19.20, 19.80)),
    'Kolubara': ((44.15, 44.40), (19.70, 20.10)),
    'Podunavlje': ((44.55, 44.75), (20.80, 21.15)),
    'Braničevo': ((44.40, 44.70), (21.10, 21.70)),
    'Šumadija': ((43.95, 44.20), (20.70, 21.10)),
    'Pomoravlje': ((43.85, 44.15), (21.10, 21.60)),
    'Bor': ((43.90, 44.30), (21.80, 22.40)),
    'Zaječar': ((43.65, 44.05), (21.80, 22.50)),
    'Zlatibor': ((43.50, 43.90), (19.35, 20.10)),
    'Moravica': ((43.70, 44.00), (20.10, 20.60)),
    'Raška': ((43.40, 43.80), (20.40, 21.00)),
    'Rasina': ((43.50, 43.80), (21.10, 21.60)),
    'Nišava': ((43.25, 43.55), (21.75, 22.25)),
    'Toplica': ((43.10, 43.40), (21.40, 21.80)),
    'Pirot': ((43.05, 43.35), (22.20, 22.90)),
    'Jablanica': ((42.90, 43.20), (21.75, 22.20)),
    'Pčinja': ((42.40, 42.80), (21.70, 22.50)),
}

STREET_NAMES = [
    'Knez Mihailova', 'Kralja Milana', 'Kralja Petra', 'Terazije', 'Bulevar Kralja Aleksandra',
    'Nemanjina', 'Makedonska', 'Svetozara Markovića', 'Takovska', 'Resavska',
    'Bulevar oslobođenja', 'Cara Lazara', 'Vojvode Stepe', 'Njegoševa', 'Džordža Vašingtona',
]

COMPANY_NAMES = [
    'Energoprojekt', 'Metalac', 'Železara Smederevo', 'Milan Blagojević', 'FAP Trucks',
    'Dunav Osiguranje', 'Delta Holding', 'MK Group', 'Telekom Srbija', 'Aerodrom Nikola Tesla',
    'Železnice Srbije', 'Elektroprivreda Srbije', 'Messer Tehnogas', 'Carnex', 'Imlek',
]

BANK_NAMES = [
    'Raiffeisen Bank', 'Komercijalna Banka', 'UniCredit Bank', 'Intesa Sanpaolo',
    'Banca Intesa', 'Erste Bank', 'OTP Banka', 'ProCredit Bank', 'AIK Banka',
]

# Fixed logins printed at the end of a seed run
DEMO_USERS = [
    {
        'email': 'admin@land.gov.rs',
        'password': 'Admin@123',
        'first_name': 'Vuk',
        'last_name': 'Stanković',
        'role': 'admin',
        'permissions': 'all',
        'department': 'IT',
        'position': 'System Administrator',
        'hire_date': '2017-02-01',
        'assigned_regions': 'all',
    },
    {
        'email': 'minister@land.gov.rs',
        'password': 'Minister@123',
        'first_name': 'Marko',
        'last_name': 'Petrović',
        'role': 'minister',
        'permissions': ['view_all_regions', 'generate_reports'],
        'department': 'management',
        'position': 'Minister of Land Affairs',
        'hire_date': '2020-01-01',
        'assigned_regions': 'all',
    },
    {
        'email': 'registrar.belgrade@land.gov.rs',
        'password': 'Registrar@123',
        'first_name': 'Ana',
        'last_name': 'Jovanović',
        'role': 'registrar',
        'permissions': ['create_parcel', 'edit_parcel', 'approve_transfer', 'reject_transfer', 'create_dispute'],
        'department': 'land_registry',
        'position': 'Senior Registrar',
        'hire_date': '2018-06-15',
        'assigned_regions': ['Belgrade', 'Kolubara'],
        'primary_office': 'Belgrade',
    },
    {
        'email': 'judge@land.gov.rs',
        'password': 'Judge@123',
        'first_name': 'Milan',
        'last_name': 'Đorđević',
        'role': 'judge',
        'permissions': ['resolve_dispute', 'view_audit_logs'],
        'department': 'judiciary',
        'position': 'Land Court Judge',
        'hire_date': '2015-03-20',
        'assigned_regions': 'all',
    },
    {
        'email': 'auditor@land.gov.rs',
        'password': 'Auditor@123',
        'first_name': 'Jelena',
        'last_name': 'Nikolić',
        'role': 'auditor',
        'permissions': ['view_audit_logs', 'blockchain_access', 'view_all_regions'],
        'department': 'audit',
        'position': 'Chief Auditor',
        'hire_date': '2019-09-10',
        'assigned_regions': 'all',
    },
    {
        'email': 'clerk@land.gov.rs',
        'password': 'Clerk@123',
        'first_name': 'Ivana',
        'last_name': 'Ilić',
        'role': 'clerk',
        'permissions': ['create_dispute'],
        'department': 'land_registry',
        'position': 'Registry Clerk',
        'hire_date': '2021-04-12',
        'assigned_regions': ['Belgrade'],
        'primary_office': 'Belgrade',
    },
    {
        'email': 'viewer@land.gov.rs',
        'password': 'Viewer@123',
        'first_name': 'Dejan',
        'last_name': 'Simić',
        'role': 'viewer',
        'permissions': [],
        'department': 'administration',
        'position': 'Analyst',
        'hire_date': '2022-10-03',
        'assigned_regions': ['Nišava'],
    },
]

REGIONAL_REGISTRAR_PERMISSIONS = ['create_parcel', 'edit_parcel', 'approve_transfer']
REGIONAL_REGISTRAR_PASSWORD = 'Registrar@123'

SUBSIDY_PROGRAMS = [
    'First-Time Homebuyer',
    'Rural Development',
    'Low-Income Housing',
    'Veterans Housing',
    'Young Families',
    'Agricultural Land',
]
