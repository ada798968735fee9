"""Built-in seed records for the reference data store.

Used when persistence holds no teams or bet types yet. Players are not
seeded; they are added from the review queue as they show up in imports.
Records use the persisted shape so they go through the same validation as
loaded data.
"""

from typing import Any, Dict, List

from betnorm.models.enums import Sport


def _team(sport: Sport, canonical: str, abbreviations: List[str], aliases: List[str]) -> Dict[str, Any]:
    return {
        "canonical": canonical,
        "sport": sport.value,
        "abbreviations": abbreviations,
        "aliases": aliases,
    }


def _stat(sport: Sport, canonical: str, description: str, aliases: List[str]) -> Dict[str, Any]:
    return {
        "canonical": canonical,
        "sport": sport.value,
        "description": description,
        "aliases": aliases,
    }


NBA, NFL, MLB, NHL = Sport.NBA, Sport.NFL, Sport.MLB, Sport.NHL

TEAMS: List[Dict[str, Any]] = [
    # NBA
    _team(NBA, "Atlanta Hawks", ["ATL"], ["ATL Hawks", "Hawks", "Atlanta"]),
    _team(NBA, "Boston Celtics", ["BOS"], ["BOS Celtics", "Celtics", "Boston"]),
    _team(NBA, "Brooklyn Nets", ["BKN", "BRK"], ["BKN Nets", "BRK Nets", "Nets", "Brooklyn"]),
    _team(NBA, "Charlotte Hornets", ["CHA", "CHO"], ["CHA Hornets", "CHO Hornets", "Hornets", "Charlotte"]),
    _team(NBA, "Chicago Bulls", ["CHI"], ["CHI Bulls", "Bulls", "Chicago"]),
    _team(NBA, "Cleveland Cavaliers", ["CLE"], ["CLE Cavaliers", "Cavaliers", "Cavs", "Cleveland"]),
    _team(NBA, "Dallas Mavericks", ["DAL"], ["DAL Mavericks", "Mavericks", "Mavs", "Dallas"]),
    _team(NBA, "Denver Nuggets", ["DEN"], ["DEN Nuggets", "Nuggets", "Denver"]),
    _team(NBA, "Detroit Pistons", ["DET"], ["DET Pistons", "Pistons", "Detroit"]),
    _team(NBA, "Golden State Warriors", ["GSW", "GS"], ["GSW Warriors", "GS Warriors", "Warriors", "Golden State"]),
    _team(NBA, "Houston Rockets", ["HOU"], ["HOU Rockets", "Rockets", "Houston"]),
    _team(NBA, "Indiana Pacers", ["IND"], ["IND Pacers", "Pacers", "Indiana"]),
    _team(NBA, "LA Clippers", ["LAC"], ["LAC Clippers", "Clippers", "Los Angeles Clippers", "L.A. Clippers"]),
    _team(NBA, "Los Angeles Lakers", ["LAL"], ["LAL Lakers", "LA Lakers", "Lakers", "L.A. Lakers"]),
    _team(NBA, "Memphis Grizzlies", ["MEM"], ["MEM Grizzlies", "Grizzlies", "Grizz", "Memphis"]),
    _team(NBA, "Miami Heat", ["MIA"], ["MIA Heat", "Heat", "Miami"]),
    _team(NBA, "Milwaukee Bucks", ["MIL"], ["MIL Bucks", "Bucks", "Milwaukee"]),
    _team(NBA, "Minnesota Timberwolves", ["MIN"], ["MIN Timberwolves", "Timberwolves", "T-Wolves", "Wolves", "Minnesota"]),
    _team(NBA, "New Orleans Pelicans", ["NOP"], ["NOP Pelicans", "Pelicans", "Pels", "New Orleans"]),
    _team(NBA, "New York Knicks", ["NYK"], ["NYK Knicks", "NY Knicks", "Knicks", "New York"]),
    _team(NBA, "Oklahoma City Thunder", ["OKC"], ["OKC Thunder", "Thunder", "Oklahoma City"]),
    _team(NBA, "Orlando Magic", ["ORL"], ["ORL Magic", "Magic", "Orlando"]),
    _team(NBA, "Philadelphia 76ers", ["PHI"], ["PHI 76ers", "76ers", "Sixers", "Philadelphia"]),
    _team(NBA, "Phoenix Suns", ["PHO", "PHX"], ["PHX Suns", "Suns", "Phoenix"]),
    _team(NBA, "Portland Trail Blazers", ["POR"], ["POR Trail Blazers", "Trail Blazers", "Blazers", "Portland"]),
    _team(NBA, "Sacramento Kings", ["SAC"], ["SAC Kings", "Kings", "Sacramento"]),
    _team(NBA, "San Antonio Spurs", ["SAS", "SA"], ["SAS Spurs", "SA Spurs", "Spurs", "San Antonio"]),
    _team(NBA, "Toronto Raptors", ["TOR"], ["TOR Raptors", "Raptors", "Raps", "Toronto"]),
    _team(NBA, "Utah Jazz", ["UTA"], ["UTA Jazz", "Jazz", "Utah"]),
    _team(NBA, "Washington Wizards", ["WAS", "WSH"], ["WAS Wizards", "WSH Wizards", "Wizards", "Wiz", "Washington"]),
    # NFL
    _team(NFL, "Arizona Cardinals", ["ARI", "ARZ"], ["ARI Cardinals", "Cardinals", "Arizona"]),
    _team(NFL, "Atlanta Falcons", ["ATL"], ["ATL Falcons", "Falcons", "Atlanta"]),
    _team(NFL, "Baltimore Ravens", ["BAL"], ["BAL Ravens", "Ravens", "Baltimore"]),
    _team(NFL, "Buffalo Bills", ["BUF"], ["BUF Bills", "Bills", "Buffalo"]),
    _team(NFL, "Carolina Panthers", ["CAR"], ["CAR Panthers", "Panthers", "Carolina"]),
    _team(NFL, "Chicago Bears", ["CHI"], ["CHI Bears", "Bears", "Chicago"]),
    _team(NFL, "Cincinnati Bengals", ["CIN"], ["CIN Bengals", "Bengals", "Cincinnati"]),
    _team(NFL, "Cleveland Browns", ["CLE"], ["CLE Browns", "Browns", "Cleveland"]),
    _team(NFL, "Dallas Cowboys", ["DAL"], ["DAL Cowboys", "Cowboys", "Dallas"]),
    _team(NFL, "Denver Broncos", ["DEN"], ["DEN Broncos", "Broncos", "Denver"]),
    _team(NFL, "Detroit Lions", ["DET"], ["DET Lions", "Lions", "Detroit"]),
    _team(NFL, "Green Bay Packers", ["GB", "GNB"], ["GB Packers", "Packers", "Green Bay"]),
    _team(NFL, "Houston Texans", ["HOU"], ["HOU Texans", "Texans", "Houston"]),
    _team(NFL, "Indianapolis Colts", ["IND"], ["IND Colts", "Colts", "Indianapolis"]),
    _team(NFL, "Jacksonville Jaguars", ["JAX", "JAC"], ["JAX Jaguars", "Jaguars", "Jags", "Jacksonville"]),
    _team(NFL, "Kansas City Chiefs", ["KC", "KAN"], ["KC Chiefs", "Chiefs", "Kansas City"]),
    _team(NFL, "Las Vegas Raiders", ["LV", "LVR"], ["LV Raiders", "Raiders", "Las Vegas"]),
    _team(NFL, "Los Angeles Chargers", ["LAC"], ["LAC Chargers", "Chargers", "LA Chargers", "L.A. Chargers"]),
    _team(NFL, "Los Angeles Rams", ["LAR"], ["LAR Rams", "LA Rams", "Rams", "L.A. Rams"]),
    _team(NFL, "Miami Dolphins", ["MIA"], ["MIA Dolphins", "Dolphins", "Miami"]),
    _team(NFL, "Minnesota Vikings", ["MIN"], ["MIN Vikings", "Vikings", "Vikes", "Minnesota"]),
    _team(NFL, "New England Patriots", ["NE", "NEP"], ["NE Patriots", "Patriots", "Pats", "New England"]),
    _team(NFL, "New Orleans Saints", ["NO", "NOR"], ["NO Saints", "Saints", "New Orleans"]),
    _team(NFL, "New York Giants", ["NYG"], ["NYG Giants", "Giants", "NY Giants"]),
    _team(NFL, "New York Jets", ["NYJ"], ["NYJ Jets", "Jets", "NY Jets"]),
    _team(NFL, "Philadelphia Eagles", ["PHI"], ["PHI Eagles", "Eagles", "Philadelphia"]),
    _team(NFL, "Pittsburgh Steelers", ["PIT"], ["PIT Steelers", "Steelers", "Pittsburgh"]),
    _team(NFL, "San Francisco 49ers", ["SF", "SFO"], ["SF 49ers", "49ers", "Niners", "San Francisco"]),
    _team(NFL, "Seattle Seahawks", ["SEA"], ["SEA Seahawks", "Seahawks", "Hawks", "Seattle"]),
    _team(NFL, "Tampa Bay Buccaneers", ["TB", "TAM"], ["TB Buccaneers", "Buccaneers", "Bucs", "Tampa Bay"]),
    _team(NFL, "Tennessee Titans", ["TEN"], ["TEN Titans", "Titans", "Tennessee"]),
    _team(NFL, "Washington Commanders", ["WAS", "WSH"], ["WAS Commanders", "Commanders", "Washington"]),
]

BET_TYPES: List[Dict[str, Any]] = [
    # NBA
    _stat(NBA, "Pts", "Points", ["Points", "Total Points"]),
    _stat(NBA, "Reb", "Rebounds", ["Rebs", "Rebounds", "Total Rebounds"]),
    _stat(NBA, "Ast", "Assists", ["Asst", "Assists"]),
    _stat(NBA, "3pt", "Made Threes", ["3-pt", "Made Threes", "Threes", "3-Pointers", "3 Pointers", "Three Pointers"]),
    _stat(NBA, "Stl", "Steals", ["Steals"]),
    _stat(NBA, "Blk", "Blocks", ["Blocks"]),
    _stat(NBA, "TO", "Turnovers", ["Turnovers"]),
    _stat(NBA, "PRA", "Points + Rebounds + Assists", ["P+R+A", "Pts+Reb+Ast", "Points+Rebounds+Assists"]),
    _stat(NBA, "PR", "Points + Rebounds", ["P+R", "Pts+Reb", "Points+Rebounds"]),
    _stat(NBA, "PA", "Points + Assists", ["P+A", "Pts+Ast", "Points+Assists"]),
    _stat(NBA, "RA", "Rebounds + Assists", ["R+A", "Reb+Ast", "Rebounds+Assists"]),
    _stat(NBA, "DD", "Double Double", ["Double Double", "DoubleDouble"]),
    _stat(NBA, "TD", "Triple Double", ["Triple Double", "TripleDouble"]),
    # NFL
    _stat(NFL, "Pass Yds", "Passing Yards", ["Passing Yards", "Passing"]),
    _stat(NFL, "Pass TD", "Passing Touchdowns", ["Passing TD", "Passing Touchdowns"]),
    _stat(NFL, "Rush Yds", "Rushing Yards", ["Rushing Yards", "Rushing"]),
    _stat(NFL, "Rec Yds", "Receiving Yards", ["Receiving Yards", "Receiving"]),
    _stat(NFL, "Rec", "Receptions", ["Receptions"]),
    _stat(NFL, "ATTD", "Anytime Touchdown", ["Anytime TD", "Anytime Touchdown", "Any Time TD"]),
    # MLB
    _stat(MLB, "Hits", "Hits", ["H"]),
    _stat(MLB, "HR", "Home Runs", ["Home Runs", "Home Run", "Homeruns"]),
    _stat(MLB, "K", "Strikeouts", ["Strikeouts", "SO", "Strike Outs"]),
    # NHL
    _stat(NHL, "Goals", "Goals", ["G"]),
    _stat(NHL, "Assists", "Assists", ["A"]),
    _stat(NHL, "SOG", "Shots on Goal", ["Shots on Goal", "Shots"]),
]
