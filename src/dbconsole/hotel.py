"""Default catalog: the hotel management menu for PostgreSQL."""

HOTEL_CATALOG = r"""
# Hotel management console.
#
# Schema: Customer, Room, MaintenanceCompany, Repair, Booking, Assigned,
# Request. Repairs are keyed by Repair.rID and point at their company through
# Repair.mCompany; Request.repairID references Repair.rID.

command 1 "Add new customer" mutation {
    customerID: integer "Enter customer ID",
    fName: text "Enter first name",
    lName: text "Enter last name",
    address: text? "Enter address",
    phNo: integer? "Enter phone number",
    dob: date? "Enter date of birth (YYYY-MM-DD)",
    gender: enum(Male, Female, Other)? "Enter gender (Male/Female/Other)",
} as "INSERT INTO Customer (customerID, fName, lName, Address, phNo, DOB, gender) "
     "VALUES (:customerID, :fName, :lName, :address, :phNo, :dob, :gender)"
  summary "Customer {customerID} added."

command 2 "Add new room" mutation {
    hotelID: integer "Enter hotel ID",
    roomNo: integer "Enter room number",
    roomType: text "Enter room type",
} as "INSERT INTO Room (hotelID, roomNo, roomType) VALUES (:hotelID, :roomNo, :roomType)"
  summary "Room {roomNo} added to hotel {hotelID}."

command 3 "Add new maintenance company" mutation {
    cmpID: integer "Enter company ID",
    name: text "Enter company name",
    address: text? "Enter company address",
    isCertified: enum(TRUE, FALSE) "Is the company certified (TRUE/FALSE)",
} as "INSERT INTO MaintenanceCompany (cmpID, name, address, isCertified) "
     "VALUES (:cmpID, :name, :address, :isCertified)"
  summary "Maintenance company {cmpID} added."

command 4 "Add new repair" mutation {
    rID: integer "Enter repair ID",
    hotelID: integer "Enter hotel ID",
    roomNo: integer "Enter room number",
    mCompany: integer "Enter maintenance company ID",
    repairDate: date "Enter repair date (YYYY-MM-DD)",
    description: text? "Enter description",
    repairType: text? "Enter repair type",
} as "INSERT INTO Repair (rID, hotelID, roomNo, mCompany, repairDate, description, repairType) "
     "VALUES (:rID, :hotelID, :roomNo, :mCompany, :repairDate, :description, :repairType)"
  summary "Repair {rID} added."

command 5 "Add new Booking" mutation {
    bID: integer "Enter booking ID",
    customer: integer "Enter customer ID",
    hotelID: integer "Enter hotel ID",
    roomNo: integer "Enter room number",
    bookingDate: date "Enter booking date (YYYY-MM-DD)",
    noOfPeople: integer? "Enter number of people",
    price: decimal "Enter price",
} as "INSERT INTO Booking (bID, customer, hotelID, roomNo, bookingDate, noOfPeople, price) "
     "VALUES (:bID, :customer, :hotelID, :roomNo, :bookingDate, :noOfPeople, :price)"
  summary "Booking {bID} created."

command 6 "Assign house cleaning staff to a room" mutation {
    asgID: integer "Enter assignment ID",
    staffID: integer "Enter staff SSN",
    hotelID: integer "Enter hotel ID",
    roomNo: integer "Enter room number",
} as "INSERT INTO Assigned (asgID, staffID, hotelID, roomNo) "
     "VALUES (:asgID, :staffID, :hotelID, :roomNo)"
  summary "Staff {staffID} assigned to room {roomNo} of hotel {hotelID}."

command 7 "Raise a repair request" mutation {
    reqID: integer "Enter request ID",
    managerID: integer "Enter manager SSN",
    repairID: integer "Enter repair ID",
    requestDate: date "Enter request date (YYYY-MM-DD)",
    description: text? "Enter description",
} as "INSERT INTO Request (reqID, managerID, repairID, requestDate, description) "
     "VALUES (:reqID, :managerID, :repairID, :requestDate, :description)"
  summary "Repair request {reqID} raised."

command 8 "Get number of available rooms" query {
    hotelID: integer "Enter hotel ID",
} as "SELECT * FROM Room WHERE hotelID = :hotelID"
  summary "Number of rooms for hotel {hotelID} is {count}"

command 9 "Get number of booked rooms" query {
    hotelID: integer "Enter hotel ID",
    bookingDate: date "Enter date (YYYY-MM-DD)",
} as "SELECT DISTINCT roomNo FROM Booking "
     "WHERE hotelID = :hotelID AND bookingDate = :bookingDate"
  summary "Number of booked rooms on {bookingDate} for hotel {hotelID} is: {count}"

command 10 "Get hotel bookings for a week" query {
    hotelID: integer "Enter hotel ID",
    startDate: date "Enter start date (YYYY-MM-DD)",
} as "SELECT hotelID, roomNo, bookingDate, customer, price FROM Booking "
     "WHERE hotelID = :hotelID "
     "AND bookingDate BETWEEN :startDate::date AND (:startDate::date + 6) "
     "ORDER BY bookingDate, roomNo"
  summary "Total bookings for the week: {count}"

command 11 "Get top k rooms with highest price for a date range" query {
    startDate: date "Enter start date (YYYY-MM-DD)",
    endDate: date "Enter end date (YYYY-MM-DD)",
    k: integer "Enter K",
} as "SELECT DISTINCT roomNo, hotelID, price FROM Booking "
     "WHERE bookingDate BETWEEN :startDate::date AND :endDate::date "
     "ORDER BY price DESC LIMIT :k"
  summary "Total rooms found: {count}"

command 12 "Get top k highest booking price for a customer" query {
    fName: text "Enter customer first name",
    lName: text "Enter customer last name",
    k: integer "Enter K (number of bookings)",
} as "SELECT B.hotelID, B.roomNo, B.bookingDate, B.price "
     "FROM Booking B JOIN Customer C ON B.customer = C.customerID "
     "WHERE C.fName = :fName AND C.lName = :lName "
     "ORDER BY B.price DESC LIMIT :k"
  summary "Total bookings found: {count}"

command 13 "Get customer total cost occurred for a give date range" query {
    hotelID: integer "Enter hotel ID",
    fName: text "Enter customer first name",
    lName: text "Enter customer last name",
    startDate: date "Enter start date (YYYY-MM-DD)",
    endDate: date "Enter end date (YYYY-MM-DD)",
} as "SELECT SUM(B.price) AS total_cost "
     "FROM Booking B JOIN Customer C ON B.customer = C.customerID "
     "WHERE B.hotelID = :hotelID AND C.fName = :fName AND C.lName = :lName "
     "AND B.bookingDate BETWEEN :startDate::date AND :endDate::date"
  summary "Total cost incurred by {fName} {lName} at hotel {hotelID} is shown above."

command 14 "List the repairs made by maintenance company" query {
    company: text "Enter maintenance company name",
} as "SELECT R.rID, R.repairType, R.hotelID, R.roomNo "
     "FROM Repair R, MaintenanceCompany M "
     "WHERE M.name = :company AND R.mCompany = M.cmpID"
  summary "Total repairs found: {count}"

command 15 "Get top k maintenance companies based on repair count" query {
    k: integer "Enter number of companies desired",
} as "SELECT M.name, COUNT(R.rID) AS repairCount "
     "FROM MaintenanceCompany M LEFT JOIN Repair R ON M.cmpID = R.mCompany "
     "GROUP BY M.name ORDER BY repairCount DESC LIMIT :k"
  summary "Total companies found: {count}"

command 16 "Get number of repairs occurred per year for a given hotel room" query {
    hotelID: integer "Enter hotel ID",
    roomNo: integer "Enter room number",
} as "SELECT EXTRACT(YEAR FROM R.repairDate) AS repairYear, COUNT(R.rID) AS repairCount "
     "FROM Repair R "
     "WHERE R.hotelID = :hotelID AND R.roomNo = :roomNo "
     "GROUP BY repairYear ORDER BY repairYear"
  summary "Total years found: {count}"

command 17 "List requests for a maintenance company" query {
    cmpID: integer "Enter maintenance company ID",
} as "SELECT RQ.reqID, RQ.managerID, RQ.repairID, RQ.requestDate, RQ.description "
     "FROM Request RQ JOIN Repair R ON RQ.repairID = R.rID "
     "WHERE R.mCompany = :cmpID"
  summary "Total requests found: {count}"

exit 18 "< EXIT"
"""
